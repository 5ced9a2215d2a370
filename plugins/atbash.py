"""
Atbash Cipher Plugin - a keyless substitution cipher

Atbash reverses the alphabet: a<->z, b<->y, c<->x, and so on. It is the
fixed-table special case of the monoalphabetic substitution cipher, and
like ROT13 it is its own inverse.

CipherStrategy and register_cipher are injected by the plugin loader;
the file is listed in manifest.json next to it.
"""


@register_cipher
class AtbashCipher(CipherStrategy):
    """Mirror every ASCII letter within its case; other characters pass through."""

    name = "atbash"
    description = "Reversed-alphabet substitution (a<->z). Keyless, self-inverse."
    requires_key = False

    def _mirror(self, text: str) -> str:
        result = []
        for char in text:
            if 'a' <= char <= 'z':
                result.append(chr(ord('z') - (ord(char) - ord('a'))))
            elif 'A' <= char <= 'Z':
                result.append(chr(ord('Z') - (ord(char) - ord('A'))))
            else:
                result.append(char)
        return ''.join(result)

    def encode(self, text: str) -> str:
        return self._mirror(text)

    def decode(self, text: str) -> str:
        return self._mirror(text)
