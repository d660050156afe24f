"""Sales app package.

This app holds the sale aggregate (a sale plus its hotel, flight and
transport legs) and the rules that guard it: every price change and every
transport attachment runs as one database transaction, validated before
anything is written, and price changes leave an append-only audit trail
attributed to the acting seller.
"""
