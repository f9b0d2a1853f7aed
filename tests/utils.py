"""
Helper functions to make writing unit tests for the REST APIs core easier
"""

import os
import sys
import random
import secrets
import tempfile
import unittest
import subprocess
import xml.etree.ElementTree as ET
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Type, Union

import pydantic
import requests
import yaml

from restapis_core import schemas as _schemas, settings as _settings

from . import conf


def stringify(data: Any) -> Any:
    """
    Convert JSON data into the shape produced by decoding its XML representation
    """

    if isinstance(data, dict):
        return {k: stringify(v) for k, v in data.items()}
    if isinstance(data, list):
        return [stringify(v) for v in data]
    if isinstance(data, bool):
        return "true" if data else "false"
    if data is None:
        return None
    return str(data)


class BaseTest(unittest.TestCase):
    """
    A base class for unit tests which introduces simple setup and teardown of unit tests

    If a subclass needs special setup or teardown functionality, it **MUST**
    call the superclasses setup and teardown methods: the superclass setup
    method at the beginning of the subclass setup method, the superclass
    teardown method at the end of the subclass teardown method.
    """

    config_file: Optional[str] = None
    _previous_config_paths: Optional[List[str]] = None

    def setUp(self) -> None:
        self.config_file = os.path.join(
            conf.TEMPORARY_DIRECTORY or tempfile.gettempdir(),
            f"config_{os.getpid()}_{secrets.token_hex(8)}.json"
        )
        self._previous_config_paths = _settings.CONFIG_PATHS
        _settings.CONFIG_PATHS = [self.config_file]

    def tearDown(self) -> None:
        if self.config_file and os.path.exists(self.config_file):
            os.remove(self.config_file)
        if self._previous_config_paths is not None:
            _settings.CONFIG_PATHS = self._previous_config_paths

    def write_config(self, mock_people: int = 0, mock_books: int = 0) -> _schemas.config.CoreConfig:
        config = _schemas.config.CoreConfig(**_settings.get_default_config())
        if conf.SERVER_LOGGING_OVERWRITE:
            config.logging = _schemas.config.LoggingConfig(**conf.SERVER_LOGGING_OVERWRITE)
        config.storage.mock_people = mock_people
        config.storage.mock_books = mock_books
        with open(self.config_file, "w") as f:
            f.write(config.model_dump_json())
        return config


class BaseAPITests(BaseTest):
    """
    A base class for tests against a real API server running in a subprocess

    The server is started freshly for every single test, using the
    number of mock people and books defined in the class attributes.
    """

    mock_people: int = 0
    mock_books: int = 0

    server_port: Optional[int] = None
    server_process: Optional[subprocess.Popen] = None
    server_log: Optional[Any] = None

    @property
    def server(self) -> str:
        return f"http://127.0.0.1:{self.server_port}/"

    def assertQuery(
            self,
            endpoint: Tuple[str, str],
            status_code: Union[int, Iterable[int]] = 200,
            json: Optional[Union[dict, pydantic.BaseModel]] = None,
            headers: Optional[dict] = None,
            r_none: bool = False,
            r_is_json: bool = True,
            r_headers: Optional[Union[Mapping, Iterable]] = None,
            r_schema: Optional[Union[pydantic.BaseModel, Type[pydantic.BaseModel]]] = None,
            r_schema_ignored_fields: Optional[List[str]] = None,
            **kwargs
    ) -> requests.Response:
        """
        Do a query to the specified endpoint and return the response

        Besides also carrying the optional JSON data, headers and other keyword arguments,
        this function asserts that the response has the specified status code. Furthermore,
        the optional asserted response headers and asserted response schema can be used,
        where the headers are either an iterable to only assert certain keys or a mapping
        to also assert values, and the schema is either a schema class or an instance
        thereof (in the later case, the values will be compared to the response, too).

        :param endpoint: tuple of the method and the full path of the endpoint
        :param status_code: asserted status code(s) of the final server's response
        :param json: optional dictionary or model holding the request data
        :param headers: optional set of headers to sent in the request
        :param r_none: switch to expect no (=empty) result and skip all other response content checks
        :param r_is_json: switch to check that the response contains JSON data
        :param r_headers optional set of headers which are asserted in the response
        :param r_schema: optional class or instance of a response schema to be asserted
        :param r_schema_ignored_fields: list of ignored fields while checking a response with schema
        :param kwargs: dict of any further keyword arguments, passed to ``requests.request``
        :return: response to the requested resource
        """

        method, path = endpoint
        if path.startswith("/"):
            path = path[1:]
        if isinstance(json, pydantic.BaseModel):
            json = json.model_dump(mode="json")

        response = requests.request(
            method.upper(),
            self.server + path,
            json=json,
            headers=headers or {},
            **kwargs
        )

        if isinstance(status_code, int):
            self.assertEqual(status_code, response.status_code, response.text)
        elif isinstance(status_code, Iterable):
            self.assertTrue(
                response.status_code in status_code,
                (response.text, response.status_code, status_code)
            )

        if r_headers is not None:
            for k in (r_headers if isinstance(r_headers, Iterable) else r_headers.keys()):
                self.assertIsNotNone(response.headers.get(k), response.headers)
                if isinstance(r_headers, Mapping):
                    self.assertEqual(r_headers[k], response.headers.get(k), response.headers)

        if r_none:
            self.assertEqual("", response.text)

        else:
            if r_is_json:
                try:
                    self.assertIsNotNone(response.json())
                except ValueError:
                    self.fail(("No JSON content detected", response.headers, response.text))

            r_schema_ignored_fields = r_schema_ignored_fields or []
            if r_schema and isinstance(r_schema, pydantic.BaseModel):
                r_model = type(r_schema)(**response.json())
                self.assertEqual(
                    r_schema.model_dump(exclude=set(r_schema_ignored_fields)),
                    r_model.model_dump(exclude=set(r_schema_ignored_fields)),
                    response.json()
                )
            elif r_schema and isinstance(r_schema, type) and issubclass(r_schema, pydantic.BaseModel):
                self.assertTrue(r_schema(**response.json()), response.json())

        return response

    def assertXML(self, response: requests.Response, root: str) -> Any:
        """
        Assert that the response carries an XML document with the given root tag and return its data
        """

        self.assertTrue(response.headers.get("Content-Type", "").startswith("application/xml"), response.headers)
        try:
            element = ET.fromstring(response.content)
        except ET.ParseError:
            self.fail(("No XML content detected", response.headers, response.text))
        self.assertEqual(root, element.tag, response.text)
        return element

    def assertYAML(self, response: requests.Response) -> Any:
        """
        Assert that the response carries a YAML document and return its data
        """

        self.assertTrue(response.headers.get("Content-Type", "").startswith("application/yaml"), response.headers)
        try:
            return yaml.safe_load(response.content)
        except yaml.YAMLError:
            self.fail(("No YAML content detected", response.headers, response.text))

    def _start_api_server(self):
        def _mk_args(port, conf_path) -> list:
            return [
                sys.executable, "-m", "restapis_core", "run", "--port", str(port),
                "--config", conf_path, "--host", "127.0.0.1", "--no-access-log"
            ]

        self.write_config(self.mock_people, self.mock_books)
        self.server_port = random.randint(10000, 20000)

        for i in range(conf.MAX_SERVER_START_RETRIES):
            self.server_log = tempfile.TemporaryFile(dir=conf.TEMPORARY_DIRECTORY)
            self.server_process = subprocess.Popen(
                _mk_args(self.server_port, self.config_file),
                stderr=subprocess.STDOUT,
                stdout=self.server_log,
                start_new_session=True
            )

            for j in range(conf.MAX_SERVER_WAIT_RETRIES):
                try:
                    self.server_process.wait(conf.API_SUBPROCESS_START_WAIT_TIMEOUT)
                except subprocess.TimeoutExpired:
                    pass
                else:
                    self._quit_api_server()
                    self.server_port += 1
                    break

                try:
                    requests.get(self.server + "health")
                    return
                except requests.exceptions.ConnectionError:
                    pass

            else:
                break

        if self.server_process is None:
            self.fail(f"Failed to find a free local port after {conf.MAX_SERVER_START_RETRIES} tries")

        self.server_process.terminate()
        self.server_process.wait()
        return_code = self.server_process.poll()
        self.server_log.seek(0)
        output = self.server_log.read().decode("UTF-8")
        self._quit_api_server()
        self.fail(
            f"Failed to successfully start the API server after {conf.MAX_SERVER_START_RETRIES} "
            f"tries. Server process returned code {return_code}.\n"
            f"{' OUTPUT '.center(80, '=')}\n{output}"
        )

    def _quit_api_server(self):
        if self.server_process is None:
            return
        self.server_process.terminate()
        try:
            self.server_process.wait(conf.API_SUBPROCESS_TERMINATE_TIMEOUT)
        except subprocess.TimeoutExpired:
            self.server_process.kill()
            try:
                self.server_process.wait(conf.API_SUBPROCESS_KILL_TIMEOUT)
            except subprocess.TimeoutExpired:
                pass
        if self.server_log is not None:
            self.server_log.close()
            self.server_log = None
        self.server_process = None

    def setUp(self) -> None:
        super().setUp()
        self._start_api_server()

    def tearDown(self) -> None:
        self._quit_api_server()
        super().tearDown()

    @classmethod
    def setUpClass(cls) -> None:
        super().setUpClass()
        p = subprocess.run(
            [sys.executable, "-m", "restapis_core", "run", "-h"],
            stderr=subprocess.PIPE,
            stdout=subprocess.PIPE,
            start_new_session=True
        )
        if p.returncode != 0:
            raise RuntimeError("Executing the 'restapis_core' module from the current Python interpreter failed!")
