"""Service layer — the naming and path-history core plus ServiceResult facades.

Core: UniquenessResolver, PathResolver, PathHistoryTracker.
Facades: PageService, NamingService, HistoryService, RedirectService, UpgradeService.
"""
