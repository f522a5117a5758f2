"""Error taxonomy parts; import from ``chat_providers.base.errors`` instead."""
