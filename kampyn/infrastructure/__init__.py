"""
Infrastructure Layer

Contains all external dependencies and implementations:
- HTTP access to the KAMPYN backend
- Configuration management
- Logging infrastructure
- Background polling
- Notification and payment widget services
"""
