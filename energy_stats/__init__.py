"""World Bank energy statistics explorer."""
