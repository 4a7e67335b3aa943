"""
Sentiment signal: reduces scored documents into per-symbol aggregates.

Modules
-------
aggregator   : aggregate_sentiment() + classify_label() + compute_trend()
               + aggregate_by_symbol().  Pure functions.
perturbation : SentimentJitter — optional bounded random offset, off by default.
snapshot     : SentimentSnapshot — one immutable view per request.
"""
