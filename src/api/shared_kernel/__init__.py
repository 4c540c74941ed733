"""Shared Kernel module.

Components shared by every bounded context: bearer token validation and
the observation context carried by domain probes. Changes here affect
multiple contexts and should be carefully coordinated.
"""
