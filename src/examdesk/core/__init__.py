"""Core logic: identity, content hierarchy, test assembly, attempts and grading."""
