#!/usr/bin/env python3
"""
KUBESELECT REST CLIENT
----------------------
The client capability the core talks to: fetch one object by name, or
list objects of a type with a label selector. The concrete implementation
rides on the official `kubernetes` ApiClient so auth, TLS and kubeconfig
handling stay with the library. No timeout is imposed here.

Author: KubeSelect Team
Date: 2026-10-18
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException
from urllib3.exceptions import HTTPError

from kubeselect.core.errors import ClientConnectionError, NotFoundError
from kubeselect.core.models import ResourceMapping

logger = logging.getLogger("kubeselect.client")


class RESTClient(ABC):
    """Interface every client capability implements."""

    @abstractmethod
    def get(self, mapping: ResourceMapping, namespace: str, name: str) -> Dict[str, Any]:
        ...

    @abstractmethod
    def list(self, mapping: ResourceMapping, namespace: str, selector: Any) -> Dict[str, Any]:
        ...


class KubernetesRESTClient(RESTClient):
    """A client bound to one group/version of the Kubernetes API."""

    def __init__(self, api_client: client.ApiClient, group: str, version: str):
        self.api_client = api_client
        self.group = group
        self.version = version

    def _path(self, mapping: ResourceMapping, namespace: str, name: Optional[str] = None) -> str:
        prefix = f"/apis/{self.group}/{self.version}" if self.group else f"/api/{self.version}"
        segments = [prefix]
        # Cluster-scoped requests never carry a namespace segment
        if mapping.namespaced and namespace:
            segments += ["namespaces", namespace]
        segments.append(mapping.resource)
        if name:
            segments.append(name)
        return "/".join(segments)

    def _request(self, path: str, query: List[Tuple[str, str]], what: str) -> Dict[str, Any]:
        logger.debug(f"GET {path} {query}")
        try:
            return self.api_client.call_api(
                path, "GET",
                query_params=query,
                header_params={"Accept": "application/json"},
                response_type="object",
                auth_settings=["BearerToken"],
                _return_http_data_only=True,
            )
        except ApiException as e:
            if e.status == 404:
                raise NotFoundError(f"{what} not found")
            raise ClientConnectionError(f"unable to retrieve {what}: ({e.status}) {e.reason}")
        except HTTPError as e:
            raise ClientConnectionError(f"unable to reach the server for {what}: {e}")

    def get(self, mapping: ResourceMapping, namespace: str, name: str) -> Dict[str, Any]:
        return self._request(
            self._path(mapping, namespace, name), [], f"{mapping.resource} '{name}'"
        )

    def list(self, mapping: ResourceMapping, namespace: str, selector: Any) -> Dict[str, Any]:
        query = []
        rendered = str(selector) if selector is not None else ""
        if rendered:
            query.append(("labelSelector", rendered))
        return self._request(self._path(mapping, namespace), query, mapping.resource)


class KubernetesClientFactory:
    """
    Builds KubernetesRESTClient instances from kubeconfig (or the in-cluster
    service account). The ApiClient is created once and shared.
    """

    def __init__(self, kubeconfig: Optional[str] = None, context: Optional[str] = None):
        self.kubeconfig = kubeconfig
        self.context = context
        self._api_client: Optional[client.ApiClient] = None

    def _load(self) -> client.ApiClient:
        try:
            return config.new_client_from_config(config_file=self.kubeconfig, context=self.context)
        except ConfigException as kube_err:
            if self.kubeconfig or self.context:
                raise ClientConnectionError(f"unable to load kubeconfig: {kube_err}")
            cfg = client.Configuration()
            try:
                config.load_incluster_config(client_configuration=cfg)
            except ConfigException as e:
                raise ClientConnectionError(f"unable to load kubeconfig or in-cluster config: {e}")
            return client.ApiClient(configuration=cfg)

    def client_for_mapping(self, mapping: ResourceMapping) -> RESTClient:
        if self._api_client is None:
            self._api_client = self._load()
        return KubernetesRESTClient(self._api_client, mapping.group, mapping.version)
