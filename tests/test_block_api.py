import pytest

from ipfs_sdk.errors import InvalidArgument, RequestError

BLORB = "QmPv52ekjS75L4JmHpXVeuJ5uX2ecSfSZo88NSyxwA3rAQ"
BLORB_RAW = "zb2rhYDhWhxyHN6HFAKGvHnLogYfnk9KvzBUZvCg7sYhS22N8"
BLORB_RAW_SHA512 = (
    "zB7NCfbtX9WqFowgroqE19J841VESUhLc1enF7faMSMhTPMR4M3kWq7rS2AfCvdHeZ3RdfoSM45q7svoMQmw2NDD37z9F"
)


async def test_put_default_format(client, fake):
    cid = await client.block.put(b"blorb")
    assert str(cid) == BLORB
    assert fake.params_of("block/put") == []


async def test_put_raw_sends_format_and_mhtype(client, fake):
    cid = await client.block.put(b"blorb", content_type="raw")
    assert str(cid) == BLORB_RAW
    assert fake.params_of("block/put") == [("mhtype", "sha2-256"), ("format", "raw")]


async def test_put_raw_sha512(client):
    cid = await client.block.put(b"blorb", content_type="raw", multi_hash="sha2-512")
    assert str(cid) == BLORB_RAW_SHA512


async def test_put_with_pin(client, fake):
    cid = await client.block.put(b"blorb", pin=True)
    assert fake.commands() == ["block/put", "pin/add"]
    assert fake.params_of("pin/add") == [("arg", str(cid)), ("recursive", "false")]


async def test_get_and_stat(client):
    cid = await client.block.put(b"blorb")
    block = await client.block.get(cid)
    assert block.id == cid
    assert block.data_bytes == b"blorb"
    assert block.size == 5
    assert block.data_stream.read() == b"blorb"

    stat = await client.block.stat(str(cid))
    assert stat.id == cid
    assert stat.size == 5
    assert stat.data_bytes == b""


async def test_get_missing_block_fails(client):
    with pytest.raises(RequestError) as ei:
        await client.block.get(BLORB)
    assert ei.value.message == "blockservice: key not found"


async def test_remove(client, fake):
    cid = await client.block.put(b"blorb")
    assert await client.block.remove(cid) == cid
    assert fake.params_of("block/rm") == [("arg", BLORB), ("force", "false")]


async def test_remove_missing_with_ignore_returns_none(client):
    assert await client.block.remove(BLORB, ignore_nonexistent=True) is None


async def test_remove_missing_reports_in_band_error(client):
    with pytest.raises(RequestError) as ei:
        await client.block.remove(BLORB)
    assert ei.value.message == "block not found"


async def test_invalid_identifier_rejected_before_request(client, fake):
    with pytest.raises(InvalidArgument):
        await client.block.get("")
    with pytest.raises(InvalidArgument):
        await client.block.stat("definitely not a cid")
    assert fake.calls == []
