""" A bridge server that answers every ``next`` request with synthetic
    data in the bridge wire format. It is meant for exercising clients
    without a real data-acquisition system behind them.
"""

import itertools
import logging
import threading
import time

import msgpack
import numpy
import zmq

from .protocol import fields
from .transport.session import zmq_context


logger = logging.getLogger(__name__)


def pack(thing):
    """ Encode *thing* the way the bridge does, with bin and str distinct.
    """

    return msgpack.packb(thing, use_bin_type=True)



def array_frames(source, path, array):
    """ Return the (header, data) frame pair describing a numpy *array*
        stored at *path*. The data is sent little-endian.
    """

    array = numpy.ascontiguousarray(array)
    wire = array.astype(array.dtype.newbyteorder('<'), copy=False)

    header = dict()
    header[fields.SOURCE] = source
    header[fields.CONTENT] = fields.ARRAY
    header[fields.PATH] = path
    header[fields.SHAPE] = list(array.shape)
    header[fields.DTYPE] = str(array.dtype)

    return (pack(header), wire.tobytes())



def msgpack_frames(source, data):
    """ Return the (header, data) frame pair for a mapping of fields.
    """

    header = dict()
    header[fields.SOURCE] = source
    header[fields.CONTENT] = fields.MSGPACK

    return (pack(header), pack(data))



class Simulator:
    """ Serve synthetic replies on a ZeroMQ REP socket bound to *endpoint*.
        A port of '*' selects any free port; the bound address is
        available as :attr:`endpoint`.

        Each reply carries one *source*: a msgpack frame of scalar and
        list fields plus metadata, followed by an 'image.data' array of
        the requested *shape* and *dtype*. Alternatively, *replies* may be
        a callable that receives the train id and returns the list of
        frames to send, which allows arbitrary (including malformed)
        replies to be served.
    """

    poll_interval = 100     # milliseconds
    first_train = 10000

    def __init__(self, endpoint='tcp://127.0.0.1:*', source='SPB_DET_AGIPD1M-1/DET/detector',
                 shape=(2, 4), dtype='uint16', pulses=4, replies=None, context=None):

        self.source = source
        self.shape = tuple(shape)
        self.dtype = numpy.dtype(dtype)
        self.pulses = pulses
        self.replies = replies
        self.requests = 0

        if context is None:
            context = zmq_context

        self.socket = context.socket(zmq.REP)
        self.socket.setsockopt(zmq.LINGER, 0)
        self.socket.bind(endpoint)
        self.endpoint = self.socket.getsockopt_string(zmq.LAST_ENDPOINT)

        self._trains = itertools.count(self.first_train)
        self.shutdown = False
        self.thread = threading.Thread(target=self.run, daemon=True)
        self.thread.start()

        logger.info('simulator serving %s on %s', source, self.endpoint)


    def __enter__(self):
        return self


    def __exit__(self, *exception):
        self.stop()


    def frames(self, train_id):
        """ Generate the frames for one reply.
        """

        if self.replies is not None:
            return list(self.replies(train_id))

        now = time.time()
        seconds = int(now)
        fraction = int((now - seconds) * 1e18)

        metadata = dict()
        metadata['source'] = self.source
        metadata['timestamp'] = now
        metadata['timestamp.sec'] = seconds
        metadata['timestamp.frac'] = str(fraction).zfill(18)
        metadata['timestamp.tid'] = train_id

        data = dict()
        data['metadata'] = metadata
        data['header.trainId'] = train_id
        data['header.pulseCount'] = self.pulses
        data['detector.pulseIds'] = list(range(self.pulses))
        data['detector.gain'] = 1.5
        data['detector.mode'] = 'calibrated'
        data['detector.flags'] = bytes(self.pulses)

        count = 1
        for dimension in self.shape:
            count *= dimension

        image = numpy.arange(train_id, train_id + count).astype(self.dtype)
        image = image.reshape(self.shape)

        frames = list()
        frames.extend(msgpack_frames(self.source, data))
        frames.extend(array_frames(self.source, 'image.data', image))
        return frames


    def _respond(self):

        request = self.socket.recv()
        self.requests += 1

        if request != fields.REQUEST:
            logger.warning('unexpected request %r', request)
            self.socket.send(b'')
            return

        train_id = next(self._trains)
        frames = self.frames(train_id)
        logger.debug('train %d: sending %d frames', train_id, len(frames))
        self.socket.send_multipart(frames)


    def run(self):

        poller = zmq.Poller()
        poller.register(self.socket, zmq.POLLIN)

        while not self.shutdown:
            for active, _flag in poller.poll(self.poll_interval):
                if active == self.socket:
                    self._respond()

        self.socket.close()


    def stop(self):
        """ Stop serving and close the socket.
        """

        self.shutdown = True
        self.thread.join()


# end of class Simulator


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
