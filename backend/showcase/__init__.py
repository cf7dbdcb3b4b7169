"""
Showcase API: Application Package Initializer
================================================

What: Backend for the company showcase site: record CRUD over five
      collections, image uploads, and the contact-form mailer.

Architecture Note:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, failure envelope
    ├─────────────────────────────────────┤
    │         Services                    │  ← records, file intake, mail
    ├─────────────────────────────────────┤
    │        Schemas                      │  ← response envelopes (Pydantic)
    ├─────────────────────────────────────┤
    │        Database (Store)             │  ← shared AsyncMongoClient
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
