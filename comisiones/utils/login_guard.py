"""
Contador de intentos fallidos de login con bloqueo temporal
No es una barrera de seguridad real, solo frena intentos repetidos
"""
import threading
import time


class LoginGuard:
    def __init__(self, max_attempts=5, lockout_seconds=300, clock=time.monotonic):
        self.max_attempts = max_attempts
        self.lockout_seconds = lockout_seconds
        self._clock = clock
        self._lock = threading.Lock()
        # clave -> (fallos, momento del último fallo)
        self._failures = {}
        self._locked_until = {}

    def remaining_lock(self, key):
        """Segundos de bloqueo restantes para la clave (0 si no está bloqueada)"""
        with self._lock:
            until = self._locked_until.get(key)
            if until is None:
                return 0
            remaining = until - self._clock()
            if remaining <= 0:
                # El bloqueo expiró: se parte de cero
                self._locked_until.pop(key, None)
                self._failures.pop(key, None)
                return 0
            return int(remaining) + 1

    def _prune(self, now):
        # Fallos viejos sin bloqueo, y bloqueos vencidos
        for key, (_, last_failure) in list(self._failures.items()):
            until = self._locked_until.get(key)
            if until is None and now - last_failure <= self.lockout_seconds:
                continue
            if until is not None and until > now:
                continue
            self._failures.pop(key, None)
            self._locked_until.pop(key, None)

    def register_failure(self, key):
        """
        Registra un intento fallido. Devuelve los intentos que quedan.
        Los fallos sin actividad por más de lockout_seconds se olvidan.
        """
        with self._lock:
            now = self._clock()
            self._prune(now)
            count = self._failures.get(key, (0, now))[0] + 1
            self._failures[key] = (count, now)
            if count >= self.max_attempts:
                self._locked_until[key] = now + self.lockout_seconds
                return 0
            return self.max_attempts - count

    def reset(self, key):
        with self._lock:
            self._failures.pop(key, None)
            self._locked_until.pop(key, None)
