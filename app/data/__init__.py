"""Static data tables loaded once at startup"""
