# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.
#
# See LICENSE for more details.
#
# Copyright: Red Hat Inc. 2026

"""
The migration capabilities and migration setting data of a hypervisor.

There is one logical instance of each per backend, identified by a fixed
InstanceID.
"""

import logging

from virtcap.errors import NotFound

LOG = logging.getLogger("avocado." + __name__)

MIGRATION_CAPS_BASE = "VirtualSystemMigrationCapabilities"
MIGRATION_CAPS_ID = "MigrationCapabilities"
MIGRATION_SD_BASE = "VirtualSystemMigrationSettingData"
MIGRATION_SD_ID = "MigrationSettingData"

# MigrateVirtualSystemToHost, MigrateVirtualSystemToSystem,
# CheckVirtualSystemIsMigratableToHost, CheckVirtualSystemIsMigratableToSystem
ASYNC_METHODS = [0, 1, 2, 3]
SYNC_METHODS = [2, 3]
# IPv4 dotted decimal, IPv6 text, DNS name
HOST_FORMATS = [2, 3, 4]

MIGRATION_TYPE_LIVE = 2
MIGRATION_PRIORITY = 0


def _validate_ref(ref, inst):
    """
    Make sure ``ref`` names ``inst``, comparing the key properties
    """
    for key, value in ref.keys.items():
        if inst.get_property(key) != value:
            LOG.debug("%s does not match %s", ref, inst.path)
            raise NotFound("No such instance (%s)" % value)


def get_migration_caps(instances, ref, validate):
    """
    Get the migration capabilities of the hypervisor of ``ref``

    :param instances: InstanceFactory
    :param ref: ObjectPath whose prefix selects the hypervisor
    :param validate: True if ``ref`` itself names the capabilities and
                     must match them
    :return: Instance
    :raise NotFound: if ``validate`` is set and ``ref`` does not match
    """
    inst = instances.new_typed_instance(ref.classname, MIGRATION_CAPS_BASE,
                                        ref.namespace)
    inst.set_property("InstanceID", MIGRATION_CAPS_ID, "string")
    inst.set_property("AsynchronousMethodsSupported", list(ASYNC_METHODS),
                      "uint16A")
    inst.set_property("SynchronousMethodsSupported", list(SYNC_METHODS),
                      "uint16A")
    inst.set_property("DestinationHostFormatsSupported", list(HOST_FORMATS),
                      "uint16A")
    if validate:
        _validate_ref(ref, inst)
    return inst


def get_migration_sd(instances, ref, validate):
    """
    Get the migration setting data of the hypervisor of ``ref``

    See :func:`get_migration_caps` for the parameters.
    """
    inst = instances.new_typed_instance(ref.classname, MIGRATION_SD_BASE,
                                        ref.namespace)
    inst.set_property("InstanceID", MIGRATION_SD_ID, "string")
    inst.set_property("MigrationType", MIGRATION_TYPE_LIVE, "uint16")
    inst.set_property("Priority", MIGRATION_PRIORITY, "uint16")
    if validate:
        _validate_ref(ref, inst)
    return inst
