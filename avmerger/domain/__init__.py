"""
This package contains the core domain models of AV Merger.

Modules:
    exceptions.py: Defines the exception types for the error conditions that can
                   occur within the application, and the `TaskError` record used
                   to report a failed merge.
    media.py: Contains `MediaEntry` and `ResolvedPair`, the values that flow from
              the directory scan to the merge tasks.
    temp_models.py: Defines `ConcatManifest`, the temporary list file that drives
                    a concatenation.
"""
