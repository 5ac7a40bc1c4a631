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
Providers backed by the virsh command line tool.

Every query runs ``virsh -c <uri> <command>`` through
:mod:`avocado.utils.process`; nothing is cached between calls, so the
answers always reflect the current state of the host.
"""

import logging
import os
import re
import shlex
import xml.etree.ElementTree as ET

from avocado.utils import path as utils_path
from avocado.utils import process

from virtcap import utils_classname
from virtcap.errors import (ConnectionFailure, InvalidIdentifier, NotFound)
from virtcap.instance import InstanceFactory
from virtcap.providers import base
from virtcap.svpc_types import ResourceType

LOG = logging.getLogger("avocado." + __name__)

_VERSION_RE = r'Running hypervisor:\s*\S+\s+(\d+)\.(\d+)\.(\d+)'


def _parse_table(output, columns=None):
    """
    Split the rows of a virsh table, skipping the header and the ruler

    :param columns: number of columns of the table, the last one keeps
                    its inner spaces. Rows are split on every blank if None
    :return: list of lists of columns
    """
    rows = []
    for line in output.splitlines()[2:]:
        if line.strip():
            if columns:
                rows.append(line.split(None, columns - 1))
            else:
                rows.append(line.split())
    return rows


def _parse_info(output):
    """
    Convert the ``Key: value`` lines of virsh output into a dict
    """
    info = {}
    for line in output.splitlines():
        if ":" in line:
            key, value = line.split(":", 1)
            info[key.strip()] = value.strip()
    return info


def _leading_int(value):
    mobj = re.match(r'\s*(\d+)', value or "")
    if not mobj:
        return None
    return int(mobj.group(1))


class VirshDomain(base.Domain):

    def __init__(self, conn, name):
        self._conn = conn
        self._name = name
        self._freed = False

    def name(self):
        if self._freed:
            raise NotFound("Domain handle of %s already freed" % self._name)
        return self._name

    def free(self):
        self._freed = True

    @property
    def freed(self):
        return self._freed


class VirshConnection(base.Connection):

    def __init__(self, uri, virsh_cmd="virsh"):
        self._uri = uri
        self._virsh = virsh_cmd
        self._closed = False

    @property
    def uri(self):
        return self._uri

    @property
    def closed(self):
        return self._closed

    def run(self, *args, **kwargs):
        """
        Run a virsh command on this connection

        :param error_cls: callable building the exception raised when the
                          command fails, ConnectionFailure by default
        :return: stdout of the command
        """
        error_cls = kwargs.pop("error_cls", None)
        if self._closed:
            raise ConnectionFailure(self._uri, "connection already closed")
        cmd = " ".join(shlex.quote(arg) for arg in
                       [self._virsh, "-c", self._uri] + list(args))
        result = process.run(cmd, ignore_status=True, verbose=False)
        if result.exit_status != 0:
            reason = result.stderr_text.strip()
            LOG.debug("'%s' failed: %s", cmd, reason)
            if error_cls is None:
                raise ConnectionFailure(self._uri, reason)
            raise error_cls(reason)
        return result.stdout_text

    def open(self):
        self.run("uri")
        LOG.debug("Connected to %s", self._uri)
        return self

    def close(self):
        if not self._closed:
            LOG.debug("Closing connection to %s", self._uri)
        self._closed = True

    def get_max_vcpus(self):
        output = self.run("maxvcpus")
        value = _leading_int(output)
        if value is None:
            raise ConnectionFailure(self._uri, "Unable to parse max vcpus")
        return value

    def get_version(self):
        output = self.run("version")
        mobj = re.search(_VERSION_RE, output, re.I)
        if not mobj:
            raise ConnectionFailure(self._uri,
                                    "Could not get hypervisor version")
        return (int(mobj.group(1)) * 1000000 + int(mobj.group(2)) * 1000 +
                int(mobj.group(3)))

    def get_capabilities(self):
        return self.run("capabilities")

    def list_domains(self):
        output = self.run("list", "--all", "--name")
        return [VirshDomain(self, name.strip())
                for name in output.splitlines() if name.strip()]

    def get_node_info(self):
        return _parse_info(self.run("nodeinfo"))

    def get_dom_info(self, dom_name):
        return _parse_info(self.run("dominfo", dom_name, error_cls=NotFound))


class VirshConnectionProvider(base.ConnectionProvider):

    def __init__(self, config, virsh_cmd=None):
        self._config = config
        self._virsh = virsh_cmd

    def _find_virsh(self):
        if self._virsh:
            return self._virsh
        try:
            return utils_path.find_command("virsh")
        except utils_path.CmdNotFoundError as detail:
            raise ConnectionFailure("virsh", str(detail))

    def connect(self, classname):
        backend = utils_classname.backend_from_classname(classname)
        uri = self._config.uri_for(backend.prefix)
        return VirshConnection(uri, self._find_virsh()).open()


class VirshDeviceProvider(base.DeviceProvider):

    def __init__(self, instances=None):
        self._instances = instances or InstanceFactory()

    def _new_rasd(self, refcn, res_type, namespace, dom_name, dev_name):
        inst = self._instances.new_typed_instance(
            refcn, utils_classname.rasd_classname_from_type(res_type),
            namespace)
        inst.set_property("InstanceID",
                          utils_classname.make_fq_devid(dom_name, dev_name))
        inst.set_property("ResourceType", int(res_type), "uint16")
        return inst

    def _proc_settings(self, conn, dom_name, refcn, namespace):
        info = conn.get_dom_info(dom_name)
        inst = self._new_rasd(refcn, ResourceType.PROCESSOR, namespace,
                              dom_name, utils_classname.PROC_DEVICE_ID)
        inst.set_property("AllocationUnits", "Processors")
        inst.set_property("VirtualQuantity",
                          _leading_int(info.get("CPU(s)")) or 0, "uint64")
        return [inst]

    def _mem_settings(self, conn, dom_name, refcn, namespace):
        info = conn.get_dom_info(dom_name)
        inst = self._new_rasd(refcn, ResourceType.MEMORY, namespace,
                              dom_name, utils_classname.MEM_DEVICE_ID)
        inst.set_property("AllocationUnits", "KiloBytes")
        inst.set_property("VirtualQuantity",
                          _leading_int(info.get("Max memory")) or 0, "uint64")
        inst.set_property("Reservation",
                          _leading_int(info.get("Used memory")) or 0, "uint64")
        return [inst]

    def _interfaces(self, conn, dom_name):
        # Interface Type Source Model MAC
        rows = _parse_table(conn.run("domiflist", dom_name,
                                     error_cls=NotFound), 5)
        return [row for row in rows if len(row) >= 5]

    def _disks(self, conn, dom_name):
        # Type Device Target Source
        rows = _parse_table(conn.run("domblklist", dom_name, "--details",
                                     error_cls=NotFound), 4)
        return [row for row in rows if len(row) >= 4]

    def _net_settings(self, conn, dom_name, refcn, namespace):
        settings = []
        for _, net_type, source, model, mac in self._interfaces(conn, dom_name):
            inst = self._new_rasd(refcn, ResourceType.NETWORK, namespace,
                                  dom_name, mac)
            inst.set_property("Address", mac)
            inst.set_property("NetworkType", net_type)
            inst.set_property("ResourceSubType", model)
            settings.append(inst)
        return settings

    def _disk_settings(self, conn, dom_name, refcn, namespace):
        settings = []
        for _, device, target, source in self._disks(conn, dom_name):
            inst = self._new_rasd(refcn, ResourceType.DISK, namespace,
                                  dom_name, target)
            inst.set_property("VirtualDevice", target)
            inst.set_property("Address", "" if source == "-" else source)
            inst.set_property("EmulatedType", device)
            settings.append(inst)
        return settings

    def settings_for_domain(self, conn, dom_name, res_type, refcn, namespace):
        handlers = {
            ResourceType.PROCESSOR: self._proc_settings,
            ResourceType.MEMORY: self._mem_settings,
            ResourceType.NETWORK: self._net_settings,
            ResourceType.DISK: self._disk_settings,
        }
        handler = handlers.get(res_type)
        if handler is None:
            raise InvalidIdentifier("Unsupported device type %s" % res_type)
        return handler(conn, dom_name, refcn, namespace)

    def device_source(self, conn, dom_name, res_type, dev_name):
        if res_type == ResourceType.NETWORK:
            for _, net_type, source, _, mac in self._interfaces(conn, dom_name):
                if mac.lower() == dev_name.lower():
                    return source if net_type == "network" else None
        elif res_type == ResourceType.DISK:
            for _, _, target, source in self._disks(conn, dom_name):
                if target == dev_name:
                    return None if source == "-" else source
        else:
            raise InvalidIdentifier("Device type %s has no source" % res_type)
        raise NotFound("No device `%s' in domain %s" % (dev_name, dom_name))


class VirshPoolProvider(base.PoolProvider):

    def __init__(self, connections, instances=None):
        self._connections = connections
        self._instances = instances or InstanceFactory()

    def _new_pool(self, refcn, pool_id, res_type, namespace):
        inst = self._instances.new_typed_instance(
            refcn, utils_classname.pool_base_from_type(res_type), namespace)
        inst.set_property("InstanceID", pool_id)
        inst.set_property("PoolID", pool_id)
        inst.set_property("ResourceType", int(res_type), "uint16")
        inst.set_property("Primordial", False, "boolean")
        return inst

    def _storage_pools(self, conn):
        output = conn.run("pool-list", "--all", "--name")
        return [name.strip() for name in output.splitlines() if name.strip()]

    def _networks(self, conn):
        output = conn.run("net-list", "--all", "--name")
        return [name.strip() for name in output.splitlines() if name.strip()]

    def pool_by_id(self, conn, pool_id, refcn, namespace):
        res_type = utils_classname.res_type_from_pool_id(pool_id)
        if res_type == ResourceType.UNKNOWN or "/" not in pool_id:
            raise InvalidIdentifier("Invalid pool identifier `%s'" % pool_id)
        name = pool_id.split("/", 1)[1]

        if res_type in (ResourceType.PROCESSOR, ResourceType.MEMORY):
            if name != "0":
                return None
            node = conn.get_node_info()
            pool = self._new_pool(refcn, pool_id, res_type, namespace)
            if res_type == ResourceType.PROCESSOR:
                pool.set_property("AllocationUnits", "Processors")
                capacity = _leading_int(node.get("CPU(s)"))
            else:
                pool.set_property("AllocationUnits", "KiloBytes")
                capacity = _leading_int(node.get("Memory size"))
            pool.set_property("Capacity", capacity or 0, "uint64")
            return pool

        if res_type == ResourceType.NETWORK:
            if name not in self._networks(conn):
                return None
            return self._new_pool(refcn, pool_id, res_type, namespace)

        if name not in self._storage_pools(conn):
            return None
        info = _parse_info(conn.run("pool-info", name, "--bytes"))
        pool = self._new_pool(refcn, pool_id, res_type, namespace)
        pool.set_property("AllocationUnits", "Megabytes")
        # The free space of the pool is its capacity for new disks
        pool.set_property("Capacity",
                          (_leading_int(info.get("Available")) or 0) >> 20,
                          "uint64")
        return pool

    def pool_by_name(self, ref, name):
        with self._connections.connect(ref.classname) as conn:
            pool = self.pool_by_id(conn, name, ref.classname, ref.namespace)
        if pool is None:
            raise NotFound("No such instance (%s)" % name)
        return pool

    def _pool_target(self, conn, name):
        xml = conn.run("pool-dumpxml", name)
        try:
            root = ET.fromstring(xml)
        except ET.ParseError as detail:
            raise ConnectionFailure(conn.uri, "Invalid XML of storage pool "
                                    "%s: %s" % (name, detail))
        return root.findtext("target/path")

    def disk_pool_for_path(self, conn, path):
        if not path:
            return None
        for name in self._storage_pools(conn):
            pool_path = self._pool_target(conn, name)
            if not pool_path:
                continue
            pool_path = pool_path.strip().rstrip("/")
            if os.path.dirname(path) == pool_path or \
                    path.startswith(pool_path + "/"):
                LOG.debug("Disk %s is in storage pool %s", path, name)
                return name
        return None
