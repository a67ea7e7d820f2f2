"""API Routes for the MDF powder coating configurator."""

from mdf_cpq.api.routes import catalog, pricing, quotes

__all__ = ["catalog", "pricing", "quotes"]
