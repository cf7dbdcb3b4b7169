# Services package init
"""
Showcase API: Services Layer
===============================

Service Inventory:
    - RecordService: per-collection store operations (insert/find/update/delete)
    - FileIntake:    writes the optional uploaded image to the uploads directory
    - Mailer:        sends the contact acknowledgement through SMTP
"""
