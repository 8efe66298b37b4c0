"""Service layer: NLU client, feature loading and result reduction."""
