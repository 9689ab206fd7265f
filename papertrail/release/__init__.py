"""Release assembly engine.

Pure functions over already-loaded data, split into:
- manifest: configuration resolution and normalization
- fragments: fragment canonicalization and validation
- bump: semantic-version bump calculation
- render: deterministic changelog and release-notes rendering
- changelog: idempotent insertion into an existing changelog
"""

from __future__ import annotations
