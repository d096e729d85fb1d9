"""
Sender / receiver / eavesdropper projections of one send.

The eavesdropper projection is built from the base64 envelope and the route
only, so nothing secret can reach it.
"""

import logging

from cryptolab.common.errors import DecryptionFailed
from cryptolab.common.protocol import (
    EavesdropperView,
    Exchange,
    Message,
    ReceiverView,
    SenderView,
)
from cryptolab.common.utils import b64_decode, b64_encode, base64_byte_size, now_ms
from cryptolab.crypto.channel import Channel
from cryptolab.session.oplog import OperationLog

logger = logging.getLogger(__name__)


def eavesdropper_view(ciphertext_b64: str, sender: str, recipient: str) -> EavesdropperView:
    return EavesdropperView(
        route=f"{sender} -> {recipient}",
        ciphertext=ciphertext_b64,
        size_bytes=base64_byte_size(ciphertext_b64),
    )


def receiver_view(channel: Channel, ciphertext_b64: str, recipient: str) -> ReceiverView:
    try:
        plaintext = channel.decrypt(b64_decode(ciphertext_b64), recipient)
    except DecryptionFailed:
        return ReceiverView(ciphertext=ciphertext_b64, plaintext=None, decrypted=False)
    return ReceiverView(ciphertext=ciphertext_b64, plaintext=plaintext, decrypted=True)


def observe(
    channel: Channel,
    sender: str,
    recipient: str,
    plaintext: str,
    log: OperationLog,
) -> Exchange:
    """
    Encrypt once, then project the result for each of the three parties.

    :return: Exchange with the message, three views and the log entry
    """
    envelope = channel.encrypt(plaintext, sender, recipient)
    ct_b64 = b64_encode(envelope)

    message = Message(
        sender_id=sender,
        recipient_id=recipient,
        plaintext=plaintext,
        ciphertext=ct_b64,
        timestamp=now_ms(),
    )

    sender_side = SenderView(plaintext=message.plaintext, ciphertext=message.ciphertext)
    receiver_side = receiver_view(channel, message.ciphertext, recipient)
    eve_side = eavesdropper_view(message.ciphertext, sender, recipient)

    entry = log.append(
        actor=sender,
        action=f"Sent to {recipient}",
        algorithm=channel.algorithm,
        details={
            "Plaintext Length": len(plaintext),
            "Plaintext Size": len(plaintext.encode("utf-8")),
            "Ciphertext Length": len(ct_b64),
            "Ciphertext Size": len(envelope),
        },
    )
    logger.info("[VIEW] %s -> %s: %d-byte envelope (%s)",
                sender, recipient, len(envelope), channel.algorithm)

    return Exchange(
        message=message,
        sender=sender_side,
        receiver=receiver_side,
        eavesdropper=eve_side,
        log_entry=entry,
    )
