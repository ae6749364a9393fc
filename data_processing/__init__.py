"""Input loading and sampling for the Location Optimizer"""
