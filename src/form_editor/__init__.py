"""Path-addressed editor for hierarchical form-definition documents."""
