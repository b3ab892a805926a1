"""
I/O models for API requests and responses.

This package contains Pydantic-based I/O schemas that define the contract
between API endpoints and clients. These models are separate from database
entities to allow independent evolution of API contracts.

Modules:
- common: Shared acknowledgement envelopes
- users: User I/O models
- posts: Post I/O models
- tags: Tag and tag-administration I/O models
- categories: Category I/O models
- comments: Comment I/O models
- media: Media library I/O models
- pages: Page and page-version I/O models
- site_settings: Settings, menus, widgets and verification-file I/O models
- system: Health, version and dashboard models
"""
