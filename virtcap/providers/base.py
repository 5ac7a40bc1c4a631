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
Interfaces of the collaborators the capability engine consumes.

The engine never talks to a hypervisor directly: it asks a
:class:`ConnectionProvider` for a fresh :class:`Connection` per logical
operation, enumerates :class:`Domain` handles on it, and uses a
:class:`DeviceProvider` and a :class:`PoolProvider` for device settings
and resource pools. Implementations must be safe to call from several
threads at once.
"""

from abc import ABC, abstractmethod


class Domain(ABC):
    """
    A handle of a domain found on a connection
    """

    @abstractmethod
    def name(self):
        raise NotImplementedError

    @abstractmethod
    def free(self):
        """
        Release the handle, it must not be used afterwards
        """
        raise NotImplementedError


class Connection(ABC):
    """
    An open hypervisor connection.

    The connection is a context manager, leaving the ``with`` block
    closes it whatever the outcome of the block is.
    """

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    @property
    @abstractmethod
    def uri(self):
        raise NotImplementedError

    @abstractmethod
    def close(self):
        raise NotImplementedError

    @abstractmethod
    def get_max_vcpus(self):
        """
        :return: the maximum number of virtual CPUs a guest may get
        :rtype: int
        """
        raise NotImplementedError

    @abstractmethod
    def get_version(self):
        """
        :return: the hypervisor version, major * 1000000 + minor * 1000 +
                 release
        :rtype: int
        """
        raise NotImplementedError

    @abstractmethod
    def get_capabilities(self):
        """
        :return: the capabilities document of the hypervisor
        :rtype: str
        """
        raise NotImplementedError

    @abstractmethod
    def list_domains(self):
        """
        :return: list of Domain handles, the caller frees each of them
        """
        raise NotImplementedError


class ConnectionProvider(ABC):

    @abstractmethod
    def connect(self, classname):
        """
        Open a connection to the hypervisor that serves ``classname``

        :raise ConnectionFailure: if no connection can be established
        """
        raise NotImplementedError


class DeviceProvider(ABC):

    @abstractmethod
    def settings_for_domain(self, conn, dom_name, res_type, refcn, namespace):
        """
        Get the resource allocation setting data of a domain's devices

        :param conn: Connection the domain lives on
        :param dom_name: name of the domain
        :param res_type: ResourceType of the wanted settings
        :param refcn: class name whose prefix types the new instances
        :param namespace: namespace of the new instances
        :return: list of Instance
        """
        raise NotImplementedError

    @abstractmethod
    def device_source(self, conn, dom_name, res_type, dev_name):
        """
        Get the backing source of a device: the network name of an
        interface, the source path of a disk.

        :return: the source or None if the device has no such source
        :raise NotFound: if the domain or the device does not exist
        """
        raise NotImplementedError


class PoolProvider(ABC):

    @abstractmethod
    def pool_by_id(self, conn, pool_id, refcn, namespace):
        """
        :return: the pool Instance or None if there is no such pool
        """
        raise NotImplementedError

    @abstractmethod
    def pool_by_name(self, ref, name):
        """
        Get the pool a reference points to by the pool identifier

        :raise NotFound: if there is no such pool
        """
        raise NotImplementedError

    @abstractmethod
    def disk_pool_for_path(self, conn, path):
        """
        :return: name of the storage pool holding ``path``, or None
        """
        raise NotImplementedError
