"""
Data ingestion: collaborator contract, file-backed source and per-request
input collection.

Modules
-------
base            : MarketDataSource protocol + DataSourceError.
snapshot_source : SnapshotDataSource — reads a JSON snapshot envelope.
collector       : collect_inputs() — fetches one portfolio's inputs,
                  degrading per-symbol failures to defaults.
"""
