# smite

Building blocks for fuzzing Lightning Network nodes.

`smite` gives a fuzz harness what it needs to talk to a running node and to
report on it:

- **BOLT 8 transport**: the `Noise_XK` handshake (`smite.handshake.NoiseHandshake`),
  the post-handshake message cipher with key rotation every 1000 uses
  (`smite.cipher.NoiseCipher`), and a TCP connection that wraps both
  (`smite.connection.NoiseConnection`). The low-level helpers
  `encrypt_with_ad`, `decrypt_with_ad`, `hkdf_two_keys` and `encode_nonce` are
  in `smite.cipher`.
- **secp256k1 keys**: `smite.secp.SecretKey`, `smite.secp.PublicKey` and
  `smite.secp.ecdh`, written in pure Python.
- **BOLT types**: `smite.types.ChannelId` (with `ChannelId.ALL`, all zeros),
  `smite.types.BigSize` (with `encoded_length()`), and `smite.types.Txid`,
  whose `str` is the byte-reversed hex form read back by `Txid.from_hex`.
- **Process control**: `smite.process.ManagedProcess` starts a target and shuts
  it down gracefully (SIGTERM, then SIGKILL after a timeout).
- **Runners, scenarios and oracles**: `smite.runners`, `smite.scenarios` and
  `smite.oracles` tie a fuzz input to a scenario and report the outcome.

Noise failures are raised as `smite.errors.NoiseError`, whose `kind` is a
`smite.errors.NoiseErrorKind` such as `ACT_TWO_BAD_TAG` or `DECRYPTION_FAILED`;
the version-check kinds also carry the offending `version` byte.

## Talking to a node

```python
from smite.connection import NoiseConnection
from smite.secp import PublicKey, SecretKey

node_id = PublicKey.from_bytes(bytes.fromhex(node_id_hex))   # the target's node ID
local_static = SecretKey(bytes([0x11] * 32))
local_ephemeral = SecretKey(bytes([0x12] * 32))

with NoiseConnection.connect(
    ("127.0.0.1", 9735), node_id, local_static, local_ephemeral, timeout=5.0
) as conn:
    conn.send_message(init_message)
    reply = conn.recv_message()
```

`timeout` (seconds, or a `datetime.timedelta`) bounds the connect and every
later read and write. Messages longer than 65535 bytes are refused with
`MessageTooLargeError`; socket and handshake failures surface as
`NoiseConnectionError`, with the underlying `OSError` or `NoiseError` as its
`__cause__`.

## Running the handshake by hand

Both sides of the handshake are available, which is handy for driving
malformed acts at a target:

```python
from smite.handshake import NoiseHandshake

initiator = NoiseHandshake.new_initiator(i_static, i_ephemeral, r_static.public_key())
responder = NoiseHandshake.new_responder(r_static, r_ephemeral)

act_two = responder.process_act_one(initiator.get_act_one())
act_three = initiator.process_act_two(act_two)
remote_static = responder.process_act_three(act_three)

sender = initiator.into_cipher()
receiver = responder.into_cipher()
packet = sender.encrypt(b"hello")
length = receiver.decrypt_length(packet[:18])
message = receiver.decrypt_message(packet[18:])
```

Calling an act out of order raises `NoiseError` with kind `INVALID_STATE`;
asking for keys before the handshake ends raises `HANDSHAKE_INCOMPLETE`.

## Managing a target process

```python
from smite.process import ManagedProcess

with ManagedProcess.spawn(["my-node", "--datadir", "/tmp/node"], "node") as proc:
    ...
    code = proc.shutdown(2.0)
```

`shutdown` returns the exit code; a negative code is the signal that ended the
process. Leaving the `with` block shuts a still-running process down with a
five-second timeout.

## Writing a scenario

A scenario prepares the target once and then runs each fuzz input against it:

```python
import sys

from smite.scenarios import Scenario, ScenarioResult, smite_run


class PingScenario(Scenario):
    def __init__(self, args):
        ...  # start the target, connect to it

    def run(self, data):
        ...  # send `data` to the target
        return ScenarioResult.ok()


if __name__ == "__main__":
    sys.exit(smite_run(PingScenario, sys.argv))
```

`smite_run` gets its runner from `smite.runners.std_runner()`, which returns a
`LocalRunner`. It reads the fuzz input from the file named by the
`SMITE_INPUT` environment variable, or from standard input when it is unset,
so reproducing a crashing input is a matter of pointing `SMITE_INPUT` at it.
A scenario returns `ScenarioResult.skip()` to discard an input and
`ScenarioResult.fail(reason)` when the target misbehaved; `smite_run` returns
0 on success or skip and 1 on failure or when the scenario's constructor
raises `ScenarioError`. `ScenarioError.is_timeout()` tells a hang apart from
other errors. Oracles subclass `smite.oracles.Oracle` and return
`OracleResult.ok()` or `OracleResult.fail(reason)`.

## What it does not do

- There is no command-line program; scenarios are run from your own script
  through `smite_run`.
- Only the local runner exists: there is no runner for a snapshotting
  hypervisor, so each run handles a single input.
- BOLT messages themselves are not encoded or decoded; `smite.types` offers only
  the basic field types.