"""External contributor reporting for GitHub organizations.

Package layout:
- github_contributors.reporting: GitHub access, filtering, collection and the CLI
- github_contributors.analysis_tools: timestamp helpers and yearly aggregation
"""

__all__ = [
    "reporting",
    "analysis_tools",
]
