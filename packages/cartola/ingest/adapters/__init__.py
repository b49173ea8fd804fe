"""Bank-specific fast paths from a parsed table straight to drafts."""
