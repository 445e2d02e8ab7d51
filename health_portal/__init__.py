"""Patient health portal: questionnaire risk assessment.

This package contains the risk scoring engine and its domain models,
isolated from persistence and presentation for easy testing and reasoning.
"""
