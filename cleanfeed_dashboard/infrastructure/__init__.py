"""
Infrastructure layer - external service integrations.

Each subdirectory wraps an external dependency:
- storage: Object storage (Spaces/S3) listing and URL signing
- forward_config: The env file shared with the forwarding process

These wrappers translate between external formats and our domain models.
"""
