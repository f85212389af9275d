"""Chain machinery, violations and context shared by every value family."""
