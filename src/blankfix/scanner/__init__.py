"""Strategy chain, retry controller and analysis strategies."""
