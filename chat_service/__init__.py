"""Storage layer for chats, chat memberships and users."""
