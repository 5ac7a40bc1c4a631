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
Which pool a resource allocation setting belongs to.

Membership is never stored: it is derived from the current state of the
hypervisor on every call. Processors and memory all come from the single
``ProcessorPool/0`` and ``MemoryPool/0``, a network interface belongs to
the pool of the network it is attached to and a disk to the pool of the
storage pool holding its source.
"""

import logging

from virtcap import utils_classname
from virtcap.errors import InvalidIdentifier, NotFound
from virtcap.svpc_types import ResourceType

LOG = logging.getLogger("avocado." + __name__)

PROC_POOL_ID = "ProcessorPool/0"
MEM_POOL_ID = "MemoryPool/0"


class PoolMembershipResolver(object):

    def __init__(self, connections, devices, pools):
        self._connections = connections
        self._devices = devices
        self._pools = pools

    def _source_of(self, conn, res_type, rasd_id):
        dom_name, dev_name = utils_classname.parse_fq_devid(rasd_id)
        source = self._devices.device_source(conn, dom_name, res_type,
                                             dev_name)
        if not source:
            raise NotFound("Unable to determine pool of `%s'" % rasd_id)
        return source

    def _device_pool(self, conn, res_type, rasd_id):
        source = self._source_of(conn, res_type, rasd_id)
        if res_type == ResourceType.NETWORK:
            return "NetworkPool/%s" % source
        pool_name = self._pools.disk_pool_for_path(conn, source)
        if pool_name is None:
            raise NotFound("Unable to determine pool of `%s'" % rasd_id)
        return "DiskPool/%s" % pool_name

    def owning_pool(self, refcn, res_type, rasd_id, conn=None):
        """
        Get the identifier of the pool a setting belongs to.

        :param refcn: class name of the setting
        :param res_type: ResourceType of the setting
        :param rasd_id: InstanceID of the setting, ``<domain>/<device>``
        :param conn: open Connection to use, a new one is opened if None
        :return: pool identifier
        :raise NotFound: if the setting belongs to no pool
        """
        if res_type == ResourceType.PROCESSOR:
            return PROC_POOL_ID
        if res_type == ResourceType.MEMORY:
            return MEM_POOL_ID
        if res_type not in (ResourceType.NETWORK, ResourceType.DISK):
            raise InvalidIdentifier("Unsupported resource type %s" % res_type)

        if conn is None:
            with self._connections.connect(refcn) as new_conn:
                pool_id = self._device_pool(new_conn, res_type, rasd_id)
        else:
            pool_id = self._device_pool(conn, res_type, rasd_id)

        LOG.debug("%s is a member of %s", rasd_id, pool_id)
        return pool_id

    def filter_by_pool(self, settings, pool_id, conn=None):
        """
        Keep the settings whose owning pool is ``pool_id``

        Settings of an unknown class or without a pool are left out.
        """
        members = []
        for inst in settings:
            try:
                res_type = utils_classname.rasd_type_from_classname(
                    inst.classname)
            except InvalidIdentifier:
                continue

            rasd_id = inst.get_property("InstanceID")
            try:
                owner = self.owning_pool(inst.classname, res_type, rasd_id,
                                         conn)
            except (NotFound, InvalidIdentifier) as detail:
                LOG.debug("%s left out: %s", rasd_id, detail)
                continue

            if owner == pool_id:
                members.append(inst)
        return members

    def settings_in_pool(self, ref, res_type, pool_id):
        """
        Get the settings of all the domains that belong to a pool.

        A domain that disappears while it is examined yields no settings,
        any other failure aborts the whole enumeration.

        :param ref: ObjectPath of the pool, it types the settings
        :param res_type: ResourceType governed by the pool
        :param pool_id: identifier of the pool
        :return: list of Instance
        """
        members = []
        with self._connections.connect(ref.classname) as conn:
            pending = list(conn.list_domains())
            try:
                while pending:
                    dom = pending.pop(0)
                    try:
                        name = dom.name()
                        try:
                            settings = self._devices.settings_for_domain(
                                conn, name, res_type, ref.classname,
                                ref.namespace)
                        except NotFound as detail:
                            LOG.debug("Domain %s yields no settings: %s",
                                      name, detail)
                            settings = []
                        members.extend(self.filter_by_pool(settings, pool_id,
                                                           conn))
                    finally:
                        dom.free()
            finally:
                for dom in pending:
                    dom.free()
        return members
