"""Run benchmarks for the direct and Fourier convolution methods."""

import argparse
import time

import numpy as np

from beamsmooth.convolution import convolve_planes, select_method
from beamsmooth.kernels import kernel_size, make_beam_kernel

parser = argparse.ArgumentParser(description=__doc__)
parser.add_argument('-n', '--niter', dest='niter', type=int, default=3,
                    help='Number of timing iterations for each case.')
parser.add_argument('-t', '--threads', dest='n_threads', type=int,
                    default=None, help='Number of threads (default: the '
                    'beamsmooth.conf.n_threads value).')
args = parser.parse_args()

cases = {
    'Small image, small kernel': ((256, 256), 2.0),
    'Small image, large kernel': ((256, 256), 15.0),
    'Large image, small kernel': ((2048, 2048), 2.0),
    'Large image, large kernel': ((2048, 2048), 15.0),
    'Cube, medium kernel': ((32, 256, 256), 6.0),
}


def time_method(data, kernel, method):
    times = []
    for _ in range(args.niter):
        t0 = time.perf_counter()
        convolve_planes(data, kernel, method=method, n_threads=args.n_threads)
        times.append(time.perf_counter() - t0)
    return min(times)


rng = np.random.default_rng(0)
print(f'{"case":30s} {"kernel":>8s} {"direct":>10s} {"fft":>10s} '
      f'{"selected":>9s}')
for name, (shape, fwhm) in cases.items():
    data = rng.normal(size=shape)
    size = kernel_size(fwhm, shape[-2:])
    kernel = make_beam_kernel(fwhm, fwhm, 0.0, size)
    direct = time_method(data, kernel, 'direct')
    fft = time_method(data, kernel, 'fft')
    selected = select_method(kernel.shape, data.size,
                             n_threads=args.n_threads)
    print(f'{name:30s} {size:8d} {direct:10.4f} {fft:10.4f} {selected:>9s}')
