"""Ponto Certo package.

Multi-tenant time tracking and HR backend organized by feature modules
(organizations, users, time records, closing, requests, ...) with a thin Flask
controller layer on top of service/repository layers.
"""
