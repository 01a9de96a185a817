"""Catalog domain - staff, services, products and clients referenced by the board"""
