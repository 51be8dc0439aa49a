"""
recoflag: flag-driven product recommendation landing page.

A visitor is resolved against a Flagship environment, the
``flagProductRecs`` flag picks a recommendation block, and the block is
fetched from the recommendation API. Every step degrades to a safe default.

Architecture:
    recoflag.core       - Pure domain logic (models, errors, query coercion)
    recoflag.adapters   - External service wrappers (Decision API, reco API)
    recoflag.services   - Orchestration (log sink, account providers, landing)
    recoflag.api        - FastAPI app, routes, middleware, metrics
    recoflag.config     - Configuration settings and logging
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
