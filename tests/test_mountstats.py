from datetime import timedelta
from pathlib import Path

import pytest

from procparse.common import IncompleteError, InternalError, ProcError
from procparse.mountstats import (
    MountStat,
    NFSServerCaps,
    parse_mountstats,
)

SIMPLE = (
    "device /dev/md127 mounted on /boot with fstype ext2 \n"
    "device /dev/md124 mounted on /home with fstype ext4 \n"
    "device tmpfs mounted on /run/user/0 with fstype tmpfs \n"
)

NFS = "\n".join(
    [
        "device elwe:/space mounted on /srv/elwe/space with fstype nfs4 statvers=1.1 ",
        "       opts:   rw,vers=4.1,rsize=131072,wsize=131072,namlen=255,acregmin=3,acregmax=60,"
        "acdirmin=30,acdirmax=60,hard,proto=tcp,port=0,timeo=600,retrans=2,sec=krb5,"
        "clientaddr=10.0.1.77,local_lock=none ",
        "       age:    3542 ",
        "       impl_id:        name='',domain='',date='0,0' ",
        "       caps:   caps=0x3ffdf,wtmult=512,dtsize=32768,bsize=0,namlen=255 ",
        "       nfsv4:  bm0=0xfdffbfff,bm1=0x40f9be3e,bm2=0x803,acl=0x3,sessions,pnfs=not configured ",
        "       sec:    flavor=6,pseudoflavor=390003 ",
        "       events: 114 1579 5 3 132 20 3019 1 2 3 4 5 115 1 4 1 2 4 3 4 5 6 7 8 9 0 1  ",
        "       bytes:  1 2 3 4 5 6 7 8  ",
        "       RPC iostats version: 1.0  p/v: 100003/4 (nfs) ",
        "       xprt:   tcp 909 0 1 0 2 294 294 0 294 0 2 0 0 ",
        "       per-op statistics ",
        "               NULL: 0 0 0 0 0 0 0 0 ",
        "               READ: 1 2 3 4 5 6 7 8 ",
        "              WRITE: 0 0 0 0 0 0 0 0 ",
        "             COMMIT: 0 0 0 0 0 0 0 0 ",
        "               OPEN: 1 1 0 320 420 0 124 124 ",
        "        ",
    ]
)


def test_simple_mountstats():
    assert parse_mountstats(SIMPLE) == [
        MountStat("/dev/md127", Path("/boot"), "ext2", None),
        MountStat("/dev/md124", Path("/home"), "ext4", None),
        MountStat("tmpfs", Path("/run/user/0"), "tmpfs", None),
    ]


def test_nfs_statistics():
    mounts = parse_mountstats(NFS)
    assert len(mounts) == 1
    stats = mounts[0].statistics
    assert stats is not None
    assert stats.version == "1.1"
    assert stats.age == timedelta(seconds=3542)
    assert stats.bytes.normal_read == 1
    assert stats.bytes.pages_write == 8
    assert stats.events.inode_revalidate == 114
    assert stats.events.pnfs_write == 1
    assert stats.server_caps() is not None


def test_nfs_details():
    stats = parse_mountstats(NFS)[0].statistics
    assert stats.opts[0] == "rw"
    assert stats.sec == ["flavor=6", "pseudoflavor=390003"]
    assert stats.server_caps() == NFSServerCaps(0x3FFDF)
    assert set(stats.per_op_stats) == {"NULL", "READ", "WRITE", "COMMIT", "OPEN"}
    op = stats.per_op_stats["OPEN"]
    assert op.operations == 1
    assert op.bytes_sent == 320
    assert op.bytes_recv == 420
    assert op.cum_resp_time == timedelta(milliseconds=124)
    read = stats.per_op_stats["READ"]
    assert read.cum_queue_time == timedelta(milliseconds=6)


def test_mounts_after_nfs_block_are_parsed():
    mounts = parse_mountstats(NFS + "\n" + SIMPLE)
    assert [m.fs for m in mounts] == ["nfs4", "ext2", "ext4", "tmpfs"]


def test_server_caps_none_without_caps_value():
    stats = parse_mountstats(NFS.replace("caps=0x3ffdf,", ""))[0].statistics
    assert stats.server_caps() is None


def test_server_caps_unknown_bit_gives_none():
    stats = parse_mountstats(NFS.replace("caps=0x3ffdf", "caps=0x4000000"))[0].statistics
    assert stats.server_caps() is None


def test_missing_age_is_error():
    text = NFS.replace("       age:    3542 \n", "")
    with pytest.raises(InternalError, match="age"):
        parse_mountstats(text)


def test_short_events_is_error():
    text = NFS.replace("events: 114 1579", "events: 114")
    with pytest.raises(ProcError):
        parse_mountstats(text)


def test_truncated_device_line_is_error():
    with pytest.raises(IncompleteError):
        parse_mountstats("device tmpfs mounted on\n")