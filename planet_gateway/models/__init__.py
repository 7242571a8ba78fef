"""Data models and schemas.

- SearchRequest / SearchFilter: Inbound search body and the validated filter
- Asset / AssetStatus: Typed view over one provider asset record
- HandlerResponse and the *Body contracts: Endpoint response shapes
"""
