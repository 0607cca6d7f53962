import collections

class MotionHistory:
    """
    Fixed-capacity window of recent MotionSamples, oldest first.
    Appending past capacity evicts the oldest sample in O(1).
    """
    def __init__(self, maxlen=10):
        if maxlen < 1:
            raise ValueError(f"history size must be at least 1, got {maxlen}")
        self.buffer = collections.deque(maxlen=maxlen)

    @property
    def capacity(self):
        return self.buffer.maxlen

    def append(self, sample):
        self.buffer.append(sample)

    def clear(self):
        self.buffer.clear()

    def latest(self):
        """Most recent sample, or None when empty."""
        if not self.buffer:
            return None
        return self.buffer[-1]

    def snapshot(self):
        return tuple(self.buffer)

    def velocities(self):
        return [s.velocity for s in self.buffer]

    def accelerations(self):
        return [s.acceleration for s in self.buffer]

    def __len__(self):
        return len(self.buffer)

    def __iter__(self):
        return iter(self.buffer)

    def __getitem__(self, idx):
        return self.buffer[idx]
