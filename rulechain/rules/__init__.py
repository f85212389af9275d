"""Value rules and the per-family rule sets built from them."""
