"""DigitalOcean API Client.

Synchronous client library for the DigitalOcean v2 REST API covering
droplets, droplet actions, images, regions, sizes, domains, domain records
and SSH keys.
"""

__version__ = "0.1.0"
