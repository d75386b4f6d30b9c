"""Command line adapter for the finance tracker."""
