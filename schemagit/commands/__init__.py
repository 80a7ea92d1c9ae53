"""Commands that read stored snapshots and print or write reports about them."""