"""msgstore.db integration.

Provides read-only access to a decrypted WhatsApp-style message store.

Example:
    from integrations.msgstore import MsgStoreReader

    reader = MsgStoreReader("msgstore.db")
    result = reader.list_conversations()
    if result.ok:
        for conv in result.items:
            messages = reader.list_messages(conv.id).items
"""

from .queries import SchemaFeatures, detect_schema_features
from .reader import MsgStoreReader

__all__ = ["MsgStoreReader", "SchemaFeatures", "detect_schema_features"]
