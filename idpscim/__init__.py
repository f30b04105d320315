"""Identity models, state repositories and a SCIM provider for syncing users, groups and members."""

__version__ = "0.1.0"