"""Services: the imperative shell that sequences core logic with storage IO."""
