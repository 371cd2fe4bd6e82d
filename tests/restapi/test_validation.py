"""Argument validation happens before any request is sent.

Every case below must raise ValueError and leave the fake API untouched.
"""

import pytest

from digitalocean_api.restapi import types

MISSING_ARGUMENT_CALLS = {
    # Droplets
    "droplets_page": lambda c: c.get_available_droplets(None),
    "kernels_droplet": lambda c: c.get_available_kernels(None, 1),
    "kernels_page": lambda c: c.get_available_kernels(1, None),
    "snapshots_droplet": lambda c: c.get_available_snapshots(None, 1),
    "snapshots_page": lambda c: c.get_available_snapshots(1, None),
    "backups_droplet": lambda c: c.get_available_backups(None, 1),
    "backups_page": lambda c: c.get_available_backups(1, None),
    "droplet_info": lambda c: c.get_droplet_info(None),
    "delete_droplet": lambda c: c.delete_droplet(None),
    # Droplet actions
    "reboot": lambda c: c.reboot_droplet(None),
    "power_cycle": lambda c: c.power_cycle_droplet(None),
    "shutdown": lambda c: c.shutdown_droplet(None),
    "power_off": lambda c: c.power_off_droplet(None),
    "power_on": lambda c: c.power_on_droplet(None),
    "password_reset": lambda c: c.reset_droplet_password(None),
    "resize_droplet": lambda c: c.resize_droplet(None, "1gb"),
    "resize_size": lambda c: c.resize_droplet(1, ""),
    "snapshot": lambda c: c.take_droplet_snapshot(None, "nightly"),
    "restore_droplet": lambda c: c.restore_droplet(None, 10),
    "restore_image": lambda c: c.restore_droplet(1, None),
    "rebuild_droplet": lambda c: c.rebuild_droplet(None, 10),
    "rebuild_image": lambda c: c.rebuild_droplet(1, None),
    "disable_backups": lambda c: c.disable_droplet_backups(None),
    "rename_droplet": lambda c: c.rename_droplet(None, "web-2"),
    "rename_name": lambda c: c.rename_droplet(1, ""),
    "kernel_droplet": lambda c: c.change_droplet_kernel(None, 5),
    "kernel_id": lambda c: c.change_droplet_kernel(1, None),
    "ipv6": lambda c: c.enable_droplet_ipv6(None),
    "private_networking": lambda c: c.enable_droplet_private_networking(None),
    # Actions
    "actions_page": lambda c: c.get_available_actions(None),
    "action_info": lambda c: c.get_action_info(None),
    "droplet_actions_droplet": lambda c: c.get_available_droplet_actions(None, 1),
    "droplet_actions_page": lambda c: c.get_available_droplet_actions(1, None),
    "image_actions_image": lambda c: c.get_available_image_actions(None, 1),
    "image_actions_page": lambda c: c.get_available_image_actions(1, None),
    # Images
    "images_page": lambda c: c.get_available_images(None),
    "image_info_id": lambda c: c.get_image_info(None),
    "image_info_slug": lambda c: c.get_image_info(""),
    "update_image_none": lambda c: c.update_image(None),
    "update_image_name": lambda c: c.update_image(types.Image(id=1)),
    "update_image_id": lambda c: c.update_image(types.Image(name="base")),
    "delete_image": lambda c: c.delete_image(None),
    "transfer_image_id": lambda c: c.transfer_image(None, "nyc3"),
    "transfer_image_region": lambda c: c.transfer_image(1, ""),
    # Regions and sizes
    "regions_page": lambda c: c.get_available_regions(None),
    "sizes_page": lambda c: c.get_available_sizes(None),
    # Domains
    "domain_info": lambda c: c.get_domain_info(""),
    "create_domain_none": lambda c: c.create_domain(None),
    "create_domain_name": lambda c: c.create_domain(types.Domain(ip_address="203.0.113.10")),
    "create_domain_ip": lambda c: c.create_domain(types.Domain(name="example.com")),
    "delete_domain": lambda c: c.delete_domain(None),
    "domain_records": lambda c: c.get_domain_records(""),
    "record_info_domain": lambda c: c.get_domain_record_info("", 1),
    "record_info_id": lambda c: c.get_domain_record_info("example.com", None),
    "create_record_domain": lambda c: c.create_domain_record("", types.DomainRecord(type="A")),
    "create_record_none": lambda c: c.create_domain_record("example.com", None),
    "update_record_domain": lambda c: c.update_domain_record("", 1, "www"),
    "update_record_id": lambda c: c.update_domain_record("example.com", None, "www"),
    "update_record_name": lambda c: c.update_domain_record("example.com", 1, ""),
    "delete_record_domain": lambda c: c.delete_domain_record("", 1),
    "delete_record_id": lambda c: c.delete_domain_record("example.com", None),
    # SSH keys
    "key_info_id": lambda c: c.get_key_info(None),
    "key_info_fingerprint": lambda c: c.get_key_info(""),
    "create_key_none": lambda c: c.create_key(None),
    "create_key_name": lambda c: c.create_key(types.Key(public_key="ssh-ed25519 AAAA")),
    "create_key_public_key": lambda c: c.create_key(types.Key(name="laptop")),
    "update_key_id": lambda c: c.update_key(None, "laptop"),
    "update_key_name": lambda c: c.update_key(5, ""),
    "delete_key_id": lambda c: c.delete_key(None),
    "delete_key_fingerprint": lambda c: c.delete_key(""),
}


@pytest.mark.parametrize(
    "call",
    list(MISSING_ARGUMENT_CALLS.values()),
    ids=list(MISSING_ARGUMENT_CALLS),
)
def test_missing_argument_fails_before_network(fake_api, do_client, call):
    with pytest.raises(ValueError, match="Missing required parameter"):
        call(do_client)
    assert fake_api.requests == []


CREATE_DROPLET_MISSING = {
    "none": None,
    "name": types.Droplet(
        region=types.Region(slug="nyc3"),
        size_slug="512mb",
        image=types.Image(id=1),
    ),
    "region": types.Droplet(name="web-1", size_slug="512mb", image=types.Image(id=1)),
    "region_slug": types.Droplet(
        name="web-1",
        region=types.Region(name="New York 3"),
        size_slug="512mb",
        image=types.Image(id=1),
    ),
    "size": types.Droplet(name="web-1", region=types.Region(slug="nyc3"), image=types.Image(id=1)),
    "image": types.Droplet(name="web-1", region=types.Region(slug="nyc3"), size_slug="512mb"),
    "image_id_or_slug": types.Droplet(
        name="web-1",
        region=types.Region(slug="nyc3"),
        size_slug="512mb",
        image=types.Image(name="Ubuntu"),
    ),
}


@pytest.mark.parametrize(
    "droplet",
    list(CREATE_DROPLET_MISSING.values()),
    ids=list(CREATE_DROPLET_MISSING),
)
def test_create_droplet_requires_name_region_size_image(fake_api, do_client, droplet):
    with pytest.raises(ValueError, match="create droplet"):
        do_client.create_droplet(droplet)
    assert fake_api.requests == []


def test_optional_page_numbers_are_not_required(fake_api, do_client):
    """Domain and key listings may be requested without a page number."""
    fake_api.respond(200, '{"domains": []}')
    do_client.get_available_domains()
    fake_api.respond(200, '{"ssh_keys": []}')
    do_client.get_available_keys()

    assert [r.url.query for r in fake_api.requests] == [b"", b""]
