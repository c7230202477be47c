"""waviewer - readable chat history from a decrypted WhatsApp message store.

Reads conversations and messages from msgstore.db and resolves participant
numbers to names from an address book snapshot.
"""

__version__ = "1.0.0"
