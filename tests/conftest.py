import asyncio
import base64
import json
from typing import Any, Dict, List, Optional, Tuple

import base58
import httpx
import pytest
from multiformats import CID, multihash

from ipfs_sdk import IpfsClient
from ipfs_sdk.dag import pb

API = "http://fake-ipfs:5001"
SELF_ID = "QmXkbZpN7sBaUJLYYzMGDUVRBKu3pdv4KzRFEGtvZpKGFD"
PEER_ID = "QmaCpDMGvV2BGHeYERUEnRQAwe3N8SzbUtfsmvsqQLuvuJ"
DEFAULT_BOOTSTRAP = [
    "/ip4/104.131.131.82/tcp/4001/ipfs/QmaCpDMGvV2BGHeYERUEnRQAwe3N8SzbUtfsmvsqQLuvuJ",
    "/ip4/178.62.158.247/tcp/4001/ipfs/QmSoLer265NRgSp2LA3dPaeykiS1J6DifTC88f5uVQKNAd",
]


def cid_v0(data: bytes) -> CID:
    return CID("base58btc", 0, "dag-pb", multihash.digest(data, "sha2-256"))


def _json(obj: Any, status: int = 200) -> httpx.Response:
    return httpx.Response(status, content=json.dumps(obj).encode("utf-8"), headers={"Content-Type": "application/json"})


def _error(message: str, status: int = 500) -> httpx.Response:
    return _json({"Message": message, "Code": 0, "Type": "error"}, status)


def _multipart_file(request: httpx.Request) -> Tuple[bytes, Optional[str]]:
    """Payload and filename of the single ``file`` part of a multipart upload."""
    ctype = request.headers["Content-Type"]
    boundary = ctype.split("boundary=", 1)[1].strip('"').encode("ascii")
    body = request.content
    part = body.split(b"--" + boundary)[1]
    head, _, payload = part.partition(b"\r\n\r\n")
    filename = None
    for line in head.decode("utf-8").split("\r\n"):
        if line.lower().startswith("content-disposition") and "filename=" in line:
            filename = line.split("filename=", 1)[1].strip().strip('"')
    if payload.endswith(b"\r\n"):
        payload = payload[:-2]
    return payload, filename


class FakeIpfs:
    """
    In-memory daemon answering the ``/api/v0`` commands the suite needs.
    Every request is recorded as ``(method, command, [(key, value), ...])``.
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[str, str, List[Tuple[str, str]]]] = []
        self.blocks: Dict[str, bytes] = {}
        self.objects: Dict[str, bytes] = {}
        self.files: Dict[str, bytes] = {}
        self.pins: Dict[str, str] = {}
        self.bootstrap: List[str] = list(DEFAULT_BOOTSTRAP)
        self.config: Dict[str, Any] = {"Swarm": {"AddrFilters": ["/ip4/10.0.0.0/tcp/0"]}, "Addresses": {"API": "/ip4/127.0.0.1/tcp/5001"}}
        self.swarm_peers_reply: Any = {
            "Peers": [
                {"Addr": "/ip4/104.131.131.82/tcp/4001", "Peer": PEER_ID, "Latency": "23.5ms"},
                {"Addr": "/ip4/178.62.158.247/tcp/4001", "Peer": "QmSoLer265NRgSp2LA3dPaeykiS1J6DifTC88f5uVQKNAd", "Latency": "n/a"},
            ]
        }
        self.subscribers: Dict[str, List[asyncio.Queue]] = {}
        self._seqno = 0

    # --- helpers for tests -------------------------------------------------

    def commands(self) -> List[str]:
        return [cmd for _method, cmd, _params in self.calls]

    def count(self, command: str) -> int:
        return self.commands().count(command)

    def params_of(self, command: str, index: int = -1) -> List[Tuple[str, str]]:
        return [params for _m, cmd, params in self.calls if cmd == command][index]

    def store_object(self, data: bytes = b"", links=()) -> CID:
        raw = pb.encode_node(data, [(bytes(CID.decode(h)), name, size) for name, h, size in links])
        cid = cid_v0(raw)
        self.objects[str(cid)] = raw
        self.blocks[str(cid)] = raw
        return cid

    # --- transport ---------------------------------------------------------

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if not path.startswith("/api/v0/"):
            return httpx.Response(404, text="404 page not found")
        command = path[len("/api/v0/"):]
        params = list(request.url.params.multi_items())
        self.calls.append((request.method, command, params))
        args = [v for k, v in params if k == "arg"]
        opts = {k: v for k, v in params if k != "arg"}
        route = getattr(self, "cmd_" + command.replace("/", "_"), None)
        if route is None:
            return httpx.Response(404, text="404 page not found")
        return route(request, args, opts)

    # --- generic -------------------------------------------------------------

    def cmd_id(self, request, args, opts):
        peer = args[0] if args else SELF_ID
        return _json(
            {
                "ID": peer,
                "PublicKey": "CAASpgIwggEiMA0GCSqGSIb3DQEBAQUAA4IBDwAwggEKAoIBAQ",
                "Addresses": [f"/ip4/127.0.0.1/tcp/4001/ipfs/{peer}", ""],
                "AgentVersion": "go-ipfs/0.4.14/",
                "ProtocolVersion": "ipfs/0.1.0",
            }
        )

    def cmd_version(self, request, args, opts):
        return _json({"Version": "0.4.14", "Commit": "", "Repo": "6", "System": "amd64/linux", "Golang": "go1.10"})

    def cmd_resolve(self, request, args, opts):
        return _json({"Path": "/ipfs/QmYNQJoKGNHTpPxCBPh9KkDpaExgd2duMa3aF6ytMpHdao"})

    def cmd_shutdown(self, request, args, opts):
        return httpx.Response(200, content=b"")

    # --- block -----------------------------------------------------------------

    def cmd_block_put(self, request, args, opts):
        data, _name = _multipart_file(request)
        fmt = opts.get("format", "dag-pb")
        alg = opts.get("mhtype", "sha2-256")
        digest = multihash.digest(data, alg)
        if fmt == "dag-pb" and alg == "sha2-256":
            cid = CID("base58btc", 0, "dag-pb", digest)
        else:
            cid = CID("base58btc", 1, fmt, digest)
        self.blocks[str(cid)] = data
        return _json({"Key": str(cid), "Size": len(data)})

    def cmd_block_get(self, request, args, opts):
        data = self.blocks.get(args[0])
        if data is None:
            return _error("blockservice: key not found")
        return httpx.Response(200, content=data)

    def cmd_block_stat(self, request, args, opts):
        data = self.blocks.get(args[0])
        if data is None:
            return _error("blockservice: key not found")
        return _json({"Key": args[0], "Size": len(data)})

    def cmd_block_rm(self, request, args, opts):
        key = args[0]
        if key in self.blocks:
            del self.blocks[key]
            return _json({"Hash": key})
        if opts.get("force") == "true":
            return httpx.Response(200, content=b"")
        return _json({"Hash": key, "Error": "block not found"})

    # --- pin -------------------------------------------------------------------

    def cmd_pin_add(self, request, args, opts):
        key = args[0].replace("/ipfs/", "")
        self.pins[key] = "recursive" if opts.get("recursive") == "true" else "direct"
        return _json({"Pins": [key]})

    def cmd_pin_ls(self, request, args, opts):
        return _json({"Keys": {k: {"Type": t} for k, t in self.pins.items()}})

    def cmd_pin_rm(self, request, args, opts):
        key = args[0]
        if key not in self.pins:
            return _error("not pinned")
        del self.pins[key]
        return _json({"Pins": [key]})

    # --- object ----------------------------------------------------------------

    def _object_json(self, key: str) -> Dict[str, Any]:
        data, links = pb.decode_node(self.objects[key])
        return {
            "Hash": key,
            "Data": data.decode("utf-8"),
            "Links": [{"Name": name, "Hash": str(CID.decode(h)), "Size": size} for h, name, size in links],
        }

    def cmd_object_put(self, request, args, opts):
        assert opts.get("inputenc") == "protobuf"
        raw, _name = _multipart_file(request)
        cid = cid_v0(raw)
        self.objects[str(cid)] = raw
        self.blocks[str(cid)] = raw
        obj = self._object_json(str(cid))
        return _json({"Hash": obj["Hash"], "Links": obj["Links"]})

    def cmd_object_get(self, request, args, opts):
        if args[0] not in self.objects:
            return _error("merkledag: not found")
        return _json(self._object_json(args[0]))

    def cmd_object_links(self, request, args, opts):
        if args[0] not in self.objects:
            return _error("merkledag: not found")
        obj = self._object_json(args[0])
        return _json({"Hash": obj["Hash"], "Links": obj["Links"]})

    def cmd_object_new(self, request, args, opts):
        data = b"\x08\x01" if args and args[0] == "unixfs-dir" else b""
        cid = self.store_object(data)
        return _json({"Hash": str(cid)})

    def cmd_object_stat(self, request, args, opts):
        raw = self.objects[args[0]]
        data, links = pb.decode_node(raw)
        return _json(
            {
                "Hash": args[0],
                "NumLinks": len(links),
                "BlockSize": len(raw),
                "LinksSize": len(raw) - len(data),
                "DataSize": len(data),
                "CumulativeSize": len(raw) + sum(size for _h, _n, size in links),
            }
        )

    def cmd_object_data(self, request, args, opts):
        data, _links = pb.decode_node(self.objects[args[0]])
        return httpx.Response(200, content=data)

    # --- unix-fs ---------------------------------------------------------------

    def cmd_add(self, request, args, opts):
        data, name = _multipart_file(request)
        cid = cid_v0(data)
        self.files[str(cid)] = data
        record = {"Name": name or str(cid), "Hash": str(cid), "Size": str(len(data) + 8)}
        return httpx.Response(200, content=(json.dumps(record) + "\n").encode("utf-8"))

    def cmd_cat(self, request, args, opts):
        key = args[0].replace("/ipfs/", "")
        data = self.files.get(key)
        if data is None:
            return _error("this dag node is a directory" if key in self.objects else "not found")
        offset = int(opts.get("offset", 0))
        return httpx.Response(200, content=data[offset:])

    def cmd_file_ls(self, request, args, opts):
        path = args[0]
        key = path.replace("/ipfs/", "")
        if key in self.files:
            entry = {"Hash": key, "Size": len(self.files[key]), "Type": "File", "Links": []}
        elif key in self.objects:
            _data, links = pb.decode_node(self.objects[key])
            entry = {
                "Hash": key,
                "Size": 0,
                "Type": "Directory",
                "Links": [
                    {
                        "Name": name,
                        "Hash": str(CID.decode(h)),
                        "Size": size,
                        "Type": "Directory" if str(CID.decode(h)) in self.objects else "File",
                    }
                    for h, name, size in links
                ],
            }
        else:
            return _error("not found")
        return _json({"Arguments": {path: key}, "Objects": {key: entry}})

    # --- bootstrap -------------------------------------------------------------

    def cmd_bootstrap_list(self, request, args, opts):
        return _json({"Peers": list(self.bootstrap)})

    def cmd_bootstrap_add(self, request, args, opts):
        if opts.get("default") == "true":
            return self.cmd_bootstrap_add_default(request, args, opts)
        if args[0] not in self.bootstrap:
            self.bootstrap.append(args[0])
        return _json({"Peers": [args[0]]})

    def cmd_bootstrap_add_default(self, request, args, opts):
        added = [a for a in DEFAULT_BOOTSTRAP if a not in self.bootstrap]
        self.bootstrap.extend(added)
        return _json({"Peers": added})

    def cmd_bootstrap_rm(self, request, args, opts):
        if opts.get("all") == "true":
            return self.cmd_bootstrap_rm_all(request, args, opts)
        removed = [a for a in self.bootstrap if a == args[0]]
        self.bootstrap = [a for a in self.bootstrap if a != args[0]]
        return _json({"Peers": removed})

    def cmd_bootstrap_rm_all(self, request, args, opts):
        removed, self.bootstrap = self.bootstrap, []
        return _json({"Peers": removed})

    # --- swarm -----------------------------------------------------------------

    def cmd_swarm_peers(self, request, args, opts):
        return _json(self.swarm_peers_reply)

    def cmd_swarm_addrs(self, request, args, opts):
        return _json({"Addrs": {PEER_ID: ["/ip4/104.131.131.82/tcp/4001", ""]}})

    def cmd_swarm_connect(self, request, args, opts):
        return _json({"Strings": [f"connect {args[0]} success"]})

    def cmd_swarm_disconnect(self, request, args, opts):
        return _json({"Strings": [f"disconnect {args[0]} success"]})

    def cmd_swarm_filters(self, request, args, opts):
        return _json({"Strings": list(self.config["Swarm"]["AddrFilters"])})

    def cmd_swarm_filters_add(self, request, args, opts):
        self.config["Swarm"]["AddrFilters"].append(args[0])
        return _json({"Strings": [args[0]]})

    def cmd_swarm_filters_rm(self, request, args, opts):
        self.config["Swarm"]["AddrFilters"].remove(args[0])
        return _json({"Strings": [args[0]]})

    # --- config ----------------------------------------------------------------

    def cmd_config_show(self, request, args, opts):
        return _json(self.config)

    def cmd_config(self, request, args, opts):
        keys = args[0].split(".")
        if len(args) > 1:
            value: Any = json.loads(args[1]) if opts.get("json") == "true" else args[1]
            target = self.config
            for k in keys[:-1]:
                target = target.setdefault(k, {})
            target[keys[-1]] = value
            return _json({"Key": args[0], "Value": value})
        value = self.config
        for k in keys:
            if not isinstance(value, dict) or k not in value:
                return _error(f"config key {args[0]!r} has no value")
            value = value[k]
        return _json({"Key": args[0], "Value": value})

    # --- naming, keys, dns, dht ------------------------------------------------

    def cmd_dns(self, request, args, opts):
        return _json({"Path": "/ipfs/QmYNQJoKGNHTpPxCBPh9KkDpaExgd2duMa3aF6ytMpHdao"})

    def cmd_name_publish(self, request, args, opts):
        return _json({"Name": SELF_ID, "Value": args[0]})

    def cmd_name_resolve(self, request, args, opts):
        return _json({"Path": "/ipfs/QmYNQJoKGNHTpPxCBPh9KkDpaExgd2duMa3aF6ytMpHdao"})

    def cmd_key_gen(self, request, args, opts):
        return _json({"Name": args[0], "Id": "QmYnAxVtqHMbstSHLhezJxnJQ6eTnswUBZcWkREvgZ6xok"})

    def cmd_key_list(self, request, args, opts):
        return _json({"Keys": [{"Name": "self", "Id": SELF_ID}, {"Name": "alice", "Id": "QmYnAxVtqHMbstSHLhezJxnJQ6eTnswUBZcWkREvgZ6xok"}]})

    def cmd_key_rm(self, request, args, opts):
        return _json({"Keys": [{"Name": args[0], "Id": "QmYnAxVtqHMbstSHLhezJxnJQ6eTnswUBZcWkREvgZ6xok"}]})

    def cmd_dht_findprovs(self, request, args, opts):
        lines = [
            {"ID": "", "Type": 4, "Responses": None, "Extra": ""},
            {"ID": "", "Type": 4, "Responses": [{"ID": PEER_ID, "Addrs": None}], "Extra": ""},
            {"ID": SELF_ID, "Type": 1, "Responses": None, "Extra": ""},
        ]
        body = "".join(json.dumps(line) + "\n" for line in lines)
        return httpx.Response(200, content=body.encode("utf-8"))

    # --- pubsub ----------------------------------------------------------------

    def cmd_pubsub_ls(self, request, args, opts):
        return _json({"Strings": sorted(t for t, qs in self.subscribers.items() if qs)})

    def cmd_pubsub_peers(self, request, args, opts):
        return _json({"Strings": [PEER_ID]})

    def cmd_pubsub_pub(self, request, args, opts):
        topic, message = args[0], args[1]
        self._seqno += 1
        record = {
            "from": base64.b64encode(base58.b58decode(SELF_ID)).decode("ascii"),
            "seqno": base64.b64encode(self._seqno.to_bytes(8, "big")).decode("ascii"),
            "data": base64.b64encode(message.encode("utf-8")).decode("ascii"),
            "topicIDs": [topic],
        }
        for queue in self.subscribers.get(topic, []):
            queue.put_nowait(json.dumps(record) + "\n")
        return httpx.Response(200, content=b"")

    def cmd_pubsub_sub(self, request, args, opts):
        topic = args[0]
        queue: asyncio.Queue = asyncio.Queue()
        self.subscribers.setdefault(topic, []).append(queue)

        async def lines():
            try:
                yield b"{}\n"
                while True:
                    line = await queue.get()
                    if line is None:
                        return
                    yield line.encode("utf-8")
            finally:
                self.subscribers[topic].remove(queue)

        return httpx.Response(200, content=lines())

    def push_raw(self, topic: str, line: str) -> None:
        for queue in self.subscribers.get(topic, []):
            queue.put_nowait(line)

    def end_subscriptions(self, topic: str) -> None:
        for queue in self.subscribers.get(topic, []):
            queue.put_nowait(None)


@pytest.fixture
def fake() -> FakeIpfs:
    return FakeIpfs()


@pytest.fixture
def client(fake: FakeIpfs) -> IpfsClient:
    return IpfsClient(API, transport=httpx.MockTransport(fake.handler))
