"""HR operations core.

Feature modules (schedules, attendance, adjustments, ...) each expose a domain
model, a repository interface with a MySQL implementation, a service layer and a
thin Flask JSON controller.
"""
