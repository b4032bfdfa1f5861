"""
Utility modules for the Streamlit frontend.

This package contains:
- api_client: Backend API communication
- query_builder: Query parameters, pagination and debouncing for the recipe list
- state: Session state for the browse page
- forms: Recipe form validation and payload building
- favorites: Client-side favorite recipes
"""
