"""
Recommendation engine: converts holdings, prices and per-symbol sentiment
into portfolio metrics and ranked BUY/SELL/HOLD actions with reasoning.

Modules
-------
metrics  : PositionValuation + compute_portfolio_metrics() — totals,
           concentration risk, averaged sentiment.  Pure functions.
rules    : HoldingSignals + Rule + RULE_CASCADE + evaluate_cascade() — the
           ordered decision list.  Pure functions.
engine   : recommend() + classify_holding() + assign_priority() +
           rank_recommendations().
advisor  : advise() + build_payload() — one request, one sentiment view.
reporter : write_recommendation_json() + write_recommendation_csv() — file output.
"""
