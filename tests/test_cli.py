import json

import httpx
import pytest
from typer.testing import CliRunner

from ipfs_sdk import IpfsClient, __version__
from ipfs_sdk.cli import common
from ipfs_sdk.cli.main import app, main

runner = CliRunner()


@pytest.fixture
def cli_fake(fake, monkeypatch):
    seen = []

    def make_client(ctx):
        seen.append(ctx.obj)
        return IpfsClient(ctx.obj.api, timeout=ctx.obj.timeout, transport=httpx.MockTransport(fake.handler))

    monkeypatch.setattr(common, "make_client", make_client)
    monkeypatch.delenv("IPFS_API_URL", raising=False)
    monkeypatch.delenv("IpfsHttpApi", raising=False)
    fake.settings_seen = seen
    return fake


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.output.strip() == f"ipfs-sdk {__version__}"


def test_global_options_reach_client(cli_fake):
    result = runner.invoke(app, ["--api", "http://other:5001", "--timeout", "3", "id"])
    assert result.exit_code == 0, result.output
    info = json.loads(result.output)
    assert info["ID"] == "QmXkbZpN7sBaUJLYYzMGDUVRBKu3pdv4KzRFEGtvZpKGFD"
    ctx = cli_fake.settings_seen[0]
    assert (ctx.api, ctx.timeout) == ("http://other:5001", 3.0)


def test_block_put_stat_get(cli_fake, tmp_path):
    path = tmp_path / "blorb.bin"
    path.write_bytes(b"blorb")
    result = runner.invoke(app, ["block", "put", str(path), "--format", "raw"])
    assert result.exit_code == 0, result.output
    cid = result.output.strip()
    assert cid == "zb2rhYDhWhxyHN6HFAKGvHnLogYfnk9KvzBUZvCg7sYhS22N8"

    result = runner.invoke(app, ["block", "stat", cid])
    assert json.loads(result.output) == {"Key": cid, "Size": 5}

    result = runner.invoke(app, ["block", "get", cid])
    assert result.stdout_bytes == b"blorb"

    result = runner.invoke(app, ["block", "rm", cid])
    assert result.output.strip() == f"removed {cid}"
    result = runner.invoke(app, ["block", "rm", cid, "--force"])
    assert result.output.strip() == "nothing removed"


def test_block_put_from_stdin(cli_fake):
    result = runner.invoke(app, ["block", "put"], input=b"blorb")
    assert result.output.strip() == "QmPv52ekjS75L4JmHpXVeuJ5uX2ecSfSZo88NSyxwA3rAQ"


def test_object_and_pin_commands(cli_fake):
    cid = str(cli_fake.store_object(b"\x08\x01"))
    result = runner.invoke(app, ["object", "stat", cid])
    assert json.loads(result.output)["NumLinks"] == 0

    result = runner.invoke(app, ["pin", "add", cid, "--direct"])
    assert result.output.strip() == f"pinned {cid}"
    assert cli_fake.params_of("pin/add") == [("arg", cid), ("recursive", "false")]
    assert runner.invoke(app, ["pin", "ls"]).output.strip() == cid
    assert runner.invoke(app, ["pin", "rm", cid]).output.strip() == f"unpinned {cid}"


def test_cat_and_ls(cli_fake):
    cli_fake.files["QmPv52ekjS75L4JmHpXVeuJ5uX2ecSfSZo88NSyxwA3rAQ"] = b"blorb"
    result = runner.invoke(app, ["cat", "/ipfs/QmPv52ekjS75L4JmHpXVeuJ5uX2ecSfSZo88NSyxwA3rAQ"])
    assert result.stdout_bytes == b"blorb"

    folder = cli_fake.store_object(b"\x08\x01", [("f.txt", "QmPv52ekjS75L4JmHpXVeuJ5uX2ecSfSZo88NSyxwA3rAQ", 13)])
    result = runner.invoke(app, ["ls", str(folder)])
    assert result.output.strip() == "QmPv52ekjS75L4JmHpXVeuJ5uX2ecSfSZo88NSyxwA3rAQ 13 file f.txt"


def test_network_commands(cli_fake):
    result = runner.invoke(app, ["bootstrap", "list"])
    assert len(result.output.strip().splitlines()) == 2
    result = runner.invoke(app, ["bootstrap", "rm", "--all"])
    assert result.output.strip() == "removed all"
    result = runner.invoke(app, ["bootstrap", "add", "--default"])
    assert len(result.output.strip().splitlines()) == 2
    result = runner.invoke(app, ["bootstrap", "add"])
    assert result.exit_code != 0

    result = runner.invoke(app, ["swarm", "peers"])
    first = result.output.splitlines()[0]
    assert first.endswith(" 23.500ms")

    result = runner.invoke(app, ["name", "resolve", "-r", "/ipns/example"])
    assert result.output.strip() == "/ipfs/QmYNQJoKGNHTpPxCBPh9KkDpaExgd2duMa3aF6ytMpHdao"
    assert cli_fake.params_of("name/resolve") == [("arg", "/ipns/example"), ("recursive", "true"), ("nocache", "false")]


def test_pubsub_pub_and_ls(cli_fake):
    result = runner.invoke(app, ["pubsub", "pub", "news", "hello"])
    assert result.exit_code == 0
    assert cli_fake.params_of("pubsub/pub") == [("arg", "news"), ("arg", "hello")]
    result = runner.invoke(app, ["pubsub", "ls"])
    assert result.output == ""


def test_main_reports_sdk_errors(cli_fake, capsys):
    code = main(["block", "get", "QmPv52ekjS75L4JmHpXVeuJ5uX2ecSfSZo88NSyxwA3rAQ"])
    assert code == 1
    assert "blockservice: key not found" in capsys.readouterr().err
