"""Cross-context plumbing shared by the catalogue and messaging domains."""
