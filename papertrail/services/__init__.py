"""Use cases that read and write the repository around the release engine."""
