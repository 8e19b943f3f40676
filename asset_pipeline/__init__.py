"""
Asset synchronization pipeline: walk the remote listing, categorize each asset,
reconcile into the repository and group the result by category.
"""
