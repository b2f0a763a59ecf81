"""PST Scanner -- low-level structural validation of Outlook OST/PST store files.

This package provides tools for:
- Decoding the fixed-offset header and root records of a store file
- Recomputing the header checksum exactly as the format defines it
- Dispatching on the narrow (ANSI) / wide (Unicode) encoding
- Checking root metadata against the observable file length
- Discovering store files in the usual Outlook folders, reporting, and
  quarantining files found corrupt

Key principles:
- The store's content (messages, folders) is never read or repaired
- A file is corrupt iff at least one error was recorded; warnings are informational
- Validation never raises: every failure becomes a finding

Main subpackages:
- models: Binary layouts, decoded records, findings and reports
- analysis: Header checksum
- ingest: Record decoder, container handle, file discovery
- validation: Validation pipeline, deep-check extension point, quarantine
- presentation: Text report and summary table
- scripts: Command-line scanner
"""

__all__ = []
